import itertools

from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, TestCase

from apps.accounts.models import User
from apps.medical.models import PatientDocuments
from apps.store.gating import (
    GateInput, Tier, evaluate_purchase_gate, gate_input_for_user, purchase_decision_for_user,
)


def patient_input(prescription=False, anvisa=False, approved=False, role=User.Role.PATIENT):
    return GateInput(
        role=role,
        is_authenticated=True,
        has_uploaded_prescription=prescription,
        has_anvisa_document=anvisa,
        admin_approved=approved,
    )


class PurchaseGateTests(SimpleTestCase):

    def test_anonymous_sees_no_prices(self):
        decision = evaluate_purchase_gate(GateInput(role=None))
        self.assertEqual(decision.tier, Tier.ANONYMOUS)
        self.assertFalse(decision.prices_visible)
        self.assertFalse(decision.can_add_to_cart)

    def test_unauthenticated_with_role_is_still_anonymous(self):
        decision = evaluate_purchase_gate(GateInput(role=User.Role.ADMIN, is_authenticated=False))
        self.assertEqual(decision.tier, Tier.ANONYMOUS)

    def test_patient_walks_through_gates_in_order(self):
        cases = [
            (patient_input(), Tier.PRESCRIPTION_REQUIRED, False, False),
            (patient_input(prescription=True), Tier.ANVISA_REQUIRED, True, False),
            (patient_input(prescription=True, anvisa=True), Tier.PENDING_APPROVAL, True, False),
            (patient_input(prescription=True, anvisa=True, approved=True), Tier.UNLOCKED, True, True),
        ]
        for gate_input, tier, prices_visible, can_add in cases:
            with self.subTest(tier=tier):
                decision = evaluate_purchase_gate(gate_input)
                self.assertEqual(decision.tier, tier)
                self.assertEqual(decision.prices_visible, prices_visible)
                self.assertEqual(decision.can_add_to_cart, can_add)

    def test_anvisa_without_prescription_does_not_skip_ahead(self):
        decision = evaluate_purchase_gate(patient_input(prescription=False, anvisa=True, approved=True))
        self.assertEqual(decision.tier, Tier.PRESCRIPTION_REQUIRED)
        self.assertFalse(decision.prices_visible)

    def test_approval_without_anvisa_stops_at_anvisa(self):
        decision = evaluate_purchase_gate(patient_input(prescription=True, anvisa=False, approved=True))
        self.assertEqual(decision.tier, Tier.ANVISA_REQUIRED)

    def test_legacy_client_role_is_a_patient(self):
        decision = evaluate_purchase_gate(patient_input(prescription=True, role=User.Role.CLIENT))
        self.assertEqual(decision.tier, Tier.ANVISA_REQUIRED)

    def test_admin_is_unlocked_without_documents(self):
        decision = evaluate_purchase_gate(GateInput(role=User.Role.ADMIN, is_authenticated=True))
        self.assertEqual(decision.tier, Tier.ADMIN)
        self.assertTrue(decision.prices_visible)
        self.assertTrue(decision.can_add_to_cart)

    def test_vendor_doctor_and_consultant_are_view_only(self):
        for role in (User.Role.VENDOR, User.Role.DOCTOR, User.Role.CONSULTANT):
            with self.subTest(role=role):
                # Flags de documentos não mudam o tier de quem não é paciente
                decision = evaluate_purchase_gate(
                    GateInput(role=role, is_authenticated=True, has_uploaded_prescription=True,
                              has_anvisa_document=True, admin_approved=True)
                )
                self.assertEqual(decision.tier, Tier.VIEW_ONLY)
                self.assertTrue(decision.prices_visible)
                self.assertFalse(decision.can_add_to_cart)

    def test_unknown_role_fails_closed(self):
        with self.assertLogs('apps.store.gating', level='WARNING'):
            decision = evaluate_purchase_gate(
                GateInput(role='superpatient', is_authenticated=True, has_uploaded_prescription=True,
                          has_anvisa_document=True, admin_approved=True)
            )
        self.assertEqual(decision.tier, Tier.ANONYMOUS)
        self.assertFalse(decision.can_add_to_cart)

    def test_every_role_has_a_tier(self):
        for role in User.Role:
            with self.subTest(role=role):
                decision = evaluate_purchase_gate(GateInput(role=role.value, is_authenticated=True))
                self.assertNotEqual(decision.tier, Tier.ANONYMOUS)

    def test_same_input_same_decision(self):
        for flags in itertools.product([False, True], repeat=3):
            gate_input = patient_input(*flags)
            self.assertEqual(evaluate_purchase_gate(gate_input), evaluate_purchase_gate(gate_input))


class GateInputForUserTests(TestCase):

    def setUp(self):
        self.patient = User.objects.create_user(email='paciente@teste.com', password='senha-forte-123')

    def test_anonymous_user(self):
        self.assertEqual(gate_input_for_user(AnonymousUser()), GateInput(role=None))
        self.assertEqual(gate_input_for_user(None), GateInput(role=None))

    def test_patient_without_documents(self):
        gate_input = gate_input_for_user(self.patient)
        self.assertTrue(gate_input.is_authenticated)
        self.assertFalse(gate_input.has_uploaded_prescription)
        self.assertEqual(purchase_decision_for_user(self.patient).tier, Tier.PRESCRIPTION_REQUIRED)

    def test_rejected_prescription_does_not_count_as_uploaded(self):
        PatientDocuments.objects.create(
            patient=self.patient,
            prescription_url='https://docs.example.com/receita.pdf',
            prescription_status=PatientDocuments.Status.REJECTED,
        )
        self.assertFalse(gate_input_for_user(self.patient).has_uploaded_prescription)

    def test_fully_approved_patient_is_unlocked(self):
        PatientDocuments.objects.create(
            patient=self.patient,
            prescription_url='https://docs.example.com/receita.pdf',
            prescription_status=PatientDocuments.Status.APPROVED,
            anvisa_document_url='https://docs.example.com/anvisa.pdf',
            anvisa_status=PatientDocuments.Status.APPROVED,
        )
        self.assertEqual(purchase_decision_for_user(self.patient).tier, Tier.UNLOCKED)
