from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from apps.accounts.models import User, Doctors

class Command(BaseCommand):
    help = 'Cria (ou atualiza) um usuário Médico para revisar receitas e autorizações ANVISA'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, required=True)
        parser.add_argument('--password', type=str, required=True)
        parser.add_argument('--name', type=str, default='Dr. Teste')
        parser.add_argument('--crm', type=str, default='12345')
        parser.add_argument('--uf', type=str, default='SP')
        parser.add_argument('--specialty', type=str, default='Clínica Geral')

    def handle(self, *args, **options):
        email = options['email']
        crm = options['crm']

        if Doctors.objects.filter(crm=crm).exclude(user__email=email).exists():
            raise CommandError(f'CRM {crm} já pertence a outro médico.')

        with transaction.atomic():
            user, created = User.objects.get_or_create(email=email)
            user.set_password(options['password'])
            user.full_name = options['name']
            user.role = User.Role.DOCTOR
            user.save()

            if created:
                self.stdout.write(self.style.SUCCESS(f'Usuário {email} criado.'))
            else:
                self.stdout.write(self.style.WARNING(f'Usuário {email} já existia. Senha atualizada.'))

            _, doc_created = Doctors.objects.update_or_create(
                user=user,
                defaults={'crm': crm, 'uf_crm': options['uf'], 'specialty': options['specialty']},
            )
            if doc_created:
                self.stdout.write(self.style.SUCCESS(f'Perfil médico criado (CRM: {crm}/{options["uf"]}).'))
            else:
                self.stdout.write(self.style.WARNING('Perfil médico atualizado.'))

        self.stdout.write(self.style.SUCCESS('Médico configurado com sucesso!'))
