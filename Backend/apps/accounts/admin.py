# apps/accounts/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Doctors, Patients

# 1. Usuário (login por e-mail, sem username)
class CustomUserAdmin(BaseUserAdmin):
    list_display = ('email', 'full_name', 'role', 'is_active', 'is_staff')
    search_fields = ('email', 'full_name', 'cpf')
    ordering = ('email',)

    fieldsets = (
        (None, {'fields': ('email', 'password', 'role')}),
        ('Informações Pessoais', {'fields': ('full_name', 'cpf', 'phone')}),
        ('Permissões', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'full_name', 'role', 'password1', 'password2')}),
    )

    list_filter = ('role', 'is_staff', 'is_active')
    filter_horizontal = ('groups', 'user_permissions')

admin.site.register(User, CustomUserAdmin)


# 2. Perfis
@admin.register(Doctors)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('user', 'crm', 'uf_crm', 'specialty')
    search_fields = ('crm', 'user__full_name')

@admin.register(Patients)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('user', 'gender', 'assigned_doctor')
    list_filter = ('gender', 'assigned_doctor')
    search_fields = ('user__full_name',)
