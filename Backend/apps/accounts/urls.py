from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import RegisterView, MyTokenObtainPairView, MeView

urlpatterns = [
    # Rota de Cadastro
    path('register/', RegisterView.as_view(), name='auth_register'),

    # Rotas de Login (JWT)
    path('login/', MyTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Usuário logado
    path('me/', MeView.as_view(), name='auth_me'),
]
