import logging

from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import Patients, User

logger = logging.getLogger(__name__)


class MyTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['full_name'] = user.full_name
        token['role'] = user.role
        token['email'] = user.email
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = {
            'id': self.user.id,
            'full_name': self.user.full_name,
            'role': self.user.role,
            'email': self.user.email,
        }
        return data


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'email', 'full_name', 'cpf', 'phone', 'role', 'created_at']
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    birth_date = serializers.DateField(write_only=True, required=False, allow_null=True)
    health_condition = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['email', 'full_name', 'password', 'cpf', 'phone', 'birth_date', 'health_condition']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Este e-mail já está cadastrado.")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        profile_data = {
            'birth_date': validated_data.pop('birth_date', None),
            'health_condition': validated_data.pop('health_condition', None) or None,
        }

        # Cadastro público sempre cria paciente; outros papéis só via admin
        with transaction.atomic():
            user = User.objects.create_user(
                email=validated_data.pop('email'),
                password=password,
                role=User.Role.PATIENT,
                **validated_data,
            )
            Patients.objects.create(user=user, **profile_data)

        logger.info(f"Paciente registrado: {user.pk} ({user.email})")
        return user
