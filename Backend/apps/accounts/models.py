# apps/accounts/models.py

from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db.models.fields.related import ManyToManyField

# =============================================================================
# 1. MANAGER DE USUÁRIOS CUSTOMIZADO (Para login via email)
# =============================================================================

class UserManager(BaseUserManager):
    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('O email deve ser definido.')

        email = self.normalize_email(email)
        extra_fields.pop('username', None)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        extra_fields.setdefault('role', User.Role.PATIENT)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.Role.ADMIN)
        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')
        return self._create_user(email, password, **extra_fields)


# =============================================================================
# 2. MODELO DE USUÁRIO CENTRAL
# =============================================================================

class User(AbstractUser):
    class Role(models.TextChoices):
        PATIENT = 'patient', 'Paciente'
        CLIENT = 'client', 'Cliente'  # nome legado de paciente
        DOCTOR = 'doctor', 'Médico'
        CONSULTANT = 'consultant', 'Consultor'
        ADMIN = 'admin', 'Administrador'
        VENDOR = 'vendor', 'Vendedor Externo'

    # Papéis que passam pelos portões de receita/ANVISA
    PATIENT_ROLES = (Role.PATIENT, Role.CLIENT)

    objects = UserManager()

    email = models.EmailField(unique=True)
    username = models.CharField(max_length=150, null=True, blank=True)

    full_name = models.CharField(max_length=255, blank=True, null=True)
    cpf = models.CharField(unique=True, max_length=14, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.PATIENT)

    created_at = models.DateTimeField(auto_now_add=True)

    # Resolve conflitos de related_name com o sistema Auth padrão do Django
    groups = ManyToManyField('auth.Group', related_name='vittaverde_user_groups', blank=True)
    user_permissions = ManyToManyField('auth.Permission', related_name='vittaverde_user_permissions', blank=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['full_name']

    class Meta:
        verbose_name = 'Usuário do Sistema'

    def __str__(self):
        return self.email

    @property
    def is_patient(self):
        return self.role in self.PATIENT_ROLES


# =============================================================================
# 3. PERFIS DE SAÚDE (Doctors e Patients)
# =============================================================================

class Doctors(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name='doctor_profile')
    crm = models.CharField(unique=True, max_length=20)
    uf_crm = models.CharField(max_length=2, blank=True, default='')
    specialty = models.CharField(max_length=100, blank=True, null=True)
    class Meta:
        verbose_name = 'Médico'

class Patients(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name='patient_profile')
    assigned_doctor = models.ForeignKey(Doctors, on_delete=models.SET_NULL, related_name='assigned_patients', blank=True, null=True)
    birth_date = models.DateField(blank=True, null=True)
    gender = models.CharField(max_length=20, blank=True, null=True)
    health_condition = models.TextField(blank=True, null=True)
    class Meta:
        verbose_name = 'Paciente'
