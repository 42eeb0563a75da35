# Backend/apps/accounts/views.py

from rest_framework import status, generics
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView

from apps.store.gating import gate_input_for_user, evaluate_purchase_gate
from .models import User
from .serializers import RegisterSerializer, MyTokenObtainPairSerializer, UserSerializer

# 1. Login (envia nome e role no token)
class MyTokenObtainPairView(TokenObtainPairView):
    serializer_class = MyTokenObtainPairSerializer
    authentication_classes = []

# 2. Registro de paciente (User + perfil Patients)
class RegisterView(generics.CreateAPIView):
    queryset = User.objects.all()
    permission_classes = (AllowAny,)
    authentication_classes = []
    serializer_class = RegisterSerializer

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        return Response({
            "message": "Cadastro realizado! Envie sua receita médica para liberar a loja.",
            "user": UserSerializer(user).data,
        }, status=status.HTTP_201_CREATED)

# 3. Dados do usuário logado + situação de compra
class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        gate_input = gate_input_for_user(request.user)
        decision = evaluate_purchase_gate(gate_input)
        return Response({
            "user": UserSerializer(request.user).data,
            "purchase": {
                "tier": decision.tier.value,
                "pricesVisible": decision.prices_visible,
                "canPurchase": decision.can_add_to_cart,
                "hasUploadedPrescription": gate_input.has_uploaded_prescription,
                "hasAnvisaDocument": gate_input.has_anvisa_document,
                "adminApproved": gate_input.admin_approved,
            },
        })
