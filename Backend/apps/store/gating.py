# apps/store/gating.py
"""
Portões de compra (receita -> ANVISA -> aprovação -> compra liberada).

`evaluate_purchase_gate` é uma função pura dos flags recebidos: não lê sessão,
banco ou cache. Quem monta a entrada a partir do usuário persistido é
`gate_input_for_user`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from django.core.exceptions import ImproperlyConfigured

from apps.accounts.models import User
from apps.medical.models import PatientDocuments

logger = logging.getLogger(__name__)


class Tier(str, Enum):
    ANONYMOUS = 'anonymous'
    PRESCRIPTION_REQUIRED = 'prescription_required'
    ANVISA_REQUIRED = 'anvisa_required'
    PENDING_APPROVAL = 'pending_approval'
    UNLOCKED = 'unlocked'
    ADMIN = 'admin'
    VIEW_ONLY = 'view_only'


# Tier -> (preço visível, pode adicionar ao carrinho)
TIER_AFFORDANCES = {
    Tier.ANONYMOUS: (False, False),
    Tier.PRESCRIPTION_REQUIRED: (False, False),
    Tier.ANVISA_REQUIRED: (True, False),
    Tier.PENDING_APPROVAL: (True, False),
    Tier.UNLOCKED: (True, True),
    Tier.ADMIN: (True, True),
    Tier.VIEW_ONLY: (True, False),
}


@dataclass(frozen=True)
class GateInput:
    role: Optional[str]
    is_authenticated: bool = False
    has_uploaded_prescription: bool = False
    has_anvisa_document: bool = False
    admin_approved: bool = False


@dataclass(frozen=True)
class GateDecision:
    tier: Tier
    prices_visible: bool
    can_add_to_cart: bool

    @classmethod
    def for_tier(cls, tier):
        prices_visible, can_add_to_cart = TIER_AFFORDANCES[tier]
        return cls(tier=tier, prices_visible=prices_visible, can_add_to_cart=can_add_to_cart)


def _patient_tier(gate_input):
    # Primeiro portão não cumprido define o tier
    if not gate_input.has_uploaded_prescription:
        return Tier.PRESCRIPTION_REQUIRED
    if not gate_input.has_anvisa_document:
        return Tier.ANVISA_REQUIRED
    if not gate_input.admin_approved:
        return Tier.PENDING_APPROVAL
    return Tier.UNLOCKED


_ROLE_TIERS = {
    User.Role.ADMIN.value: lambda gate_input: Tier.ADMIN,
    User.Role.VENDOR.value: lambda gate_input: Tier.VIEW_ONLY,
    User.Role.DOCTOR.value: lambda gate_input: Tier.VIEW_ONLY,
    User.Role.CONSULTANT.value: lambda gate_input: Tier.VIEW_ONLY,
    User.Role.PATIENT.value: _patient_tier,
    User.Role.CLIENT.value: _patient_tier,
}

_unmapped = {role.value for role in User.Role} - set(_ROLE_TIERS)
if _unmapped:
    raise ImproperlyConfigured(f"Papéis sem tier de compra definido: {sorted(_unmapped)}")


def evaluate_purchase_gate(gate_input: GateInput) -> GateDecision:
    if not gate_input.is_authenticated:
        return GateDecision.for_tier(Tier.ANONYMOUS)

    resolve = _ROLE_TIERS.get(gate_input.role)
    if resolve is None:
        logger.warning(f"Papel desconhecido '{gate_input.role}' no catálogo. Negando acesso (anonymous).")
        return GateDecision.for_tier(Tier.ANONYMOUS)

    return GateDecision.for_tier(resolve(gate_input))


def gate_input_for_user(user) -> GateInput:
    if user is None or not getattr(user, 'is_authenticated', False):
        return GateInput(role=None)

    has_prescription = has_anvisa = approved = False
    if user.is_patient:
        # Consulta direta: user.documents fica em cache no objeto do usuário
        documents = PatientDocuments.objects.filter(patient=user).first()
        if documents is not None:
            has_prescription = documents.has_uploaded_prescription
            has_anvisa = documents.has_anvisa_document
            approved = documents.admin_approved

    return GateInput(
        role=user.role,
        is_authenticated=True,
        has_uploaded_prescription=has_prescription,
        has_anvisa_document=has_anvisa,
        admin_approved=approved,
    )


def purchase_decision_for_user(user) -> GateDecision:
    return evaluate_purchase_gate(gate_input_for_user(user))
