# Migração inicial de medical (documentos do paciente)

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PatientDocuments',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('prescription_url', models.CharField(blank=True, max_length=500, null=True)),
                ('prescription_status', models.CharField(blank=True, choices=[('pending', 'Pendente'), ('approved', 'Aprovado'), ('rejected', 'Reprovado')], max_length=20, null=True)),
                ('prescription_reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('prescription_rejection_reason', models.TextField(blank=True, null=True)),
                ('prescription_notes', models.TextField(blank=True, null=True)),
                ('anvisa_document_url', models.CharField(blank=True, max_length=500, null=True)),
                ('anvisa_status', models.CharField(blank=True, choices=[('pending', 'Pendente'), ('approved', 'Aprovado'), ('rejected', 'Reprovado')], max_length=20, null=True)),
                ('anvisa_reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('anvisa_rejection_reason', models.TextField(blank=True, null=True)),
                ('anvisa_notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='documents', to=settings.AUTH_USER_MODEL)),
                ('prescription_reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('anvisa_reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Documentos do Paciente',
            },
        ),
    ]
