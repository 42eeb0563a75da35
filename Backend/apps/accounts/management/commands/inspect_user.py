import json
from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder

from apps.accounts.models import User
from apps.medical.models import PatientDocuments
from apps.store.gating import gate_input_for_user, evaluate_purchase_gate
from apps.store.models import Orders, StockMovements

class Command(BaseCommand):
    help = 'Inspeciona um usuário: perfil, documentos, tier de compra, pedidos e movimentações de estoque'

    def add_arguments(self, parser):
        parser.add_argument('--email', type=str, help='Email do usuário')
        parser.add_argument('--id', type=int, help='ID do usuário')

    def handle(self, *args, **options):
        email = options.get('email')
        user_id = options.get('id')

        if not email and not user_id:
            raise CommandError('Forneça --email ou --id')

        try:
            user = User.objects.get(email=email) if email else User.objects.get(id=user_id)
        except User.DoesNotExist:
            raise CommandError('Usuário não encontrado.')

        gate_input = gate_input_for_user(user)
        decision = evaluate_purchase_gate(gate_input)

        data = {
            "BASICO": {
                "id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "phone": user.phone,
                "role": user.role,
                "date_joined": user.created_at,
                "is_active": user.is_active,
            },
            "PERFIL": {},
            "DOCUMENTOS": None,
            "COMPRA": {
                "tier": decision.tier.value,
                "prices_visible": decision.prices_visible,
                "can_add_to_cart": decision.can_add_to_cart,
            },
            "LOJA": {
                "pedidos": [],
                "movimentacoes_registradas": 0,
            },
        }

        # 1. Perfil específico
        profile = getattr(user, 'patient_profile', None)
        if profile:
            data["PERFIL"]["paciente"] = {
                "gender": profile.gender,
                "birth_date": profile.birth_date,
                "assigned_doctor_id": profile.assigned_doctor_id,
            }
        if hasattr(user, 'doctor_profile'):
            data["PERFIL"]["medico"] = {
                "crm": user.doctor_profile.crm,
                "uf_crm": user.doctor_profile.uf_crm,
                "specialty": user.doctor_profile.specialty,
            }

        # 2. Documentos (receita / ANVISA)
        documents = PatientDocuments.objects.filter(patient=user).first()
        if documents:
            data["DOCUMENTOS"] = {
                "prescription_url": documents.prescription_url,
                "prescription_status": documents.prescription_status,
                "anvisa_document_url": documents.anvisa_document_url,
                "anvisa_status": documents.anvisa_status,
                "admin_approved": documents.admin_approved,
            }

        # 3. Loja
        for o in Orders.objects.filter(user=user).order_by('-created_at'):
            data["LOJA"]["pedidos"].append({
                "id": o.id,
                "reference": o.reference,
                "total": float(o.total_amount),
                "status": o.status,
                "date": o.created_at,
            })
        data["LOJA"]["movimentacoes_registradas"] = StockMovements.objects.filter(user=user).count()

        self.stdout.write(json.dumps(data, indent=4, cls=DjangoJSONEncoder))
