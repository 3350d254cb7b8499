from typing import Dict, Optional
import logging

from billing import BillDraft, BillingEngine
from errors import NotFound, ValidationError
from inventory import InventoryLedger
from prescriptions import PrescriptionWorkflow
from schemas import Bill, DispenseRequested
import seed_data

logger = logging.getLogger(__name__)


class PharmacyDesk:
    """One session of the pharmacy desk.

    Owns the three modules and carries the effects between them: billing
    prices come from the inventory catalog, and each dispensed prescription
    opens a bill draft for its patient.
    """

    def __init__(self, inventory: InventoryLedger, billing: BillingEngine, prescriptions: PrescriptionWorkflow):
        self.inventory = inventory
        self.billing = billing
        self.prescriptions = prescriptions
        self.drafts: Dict[str, BillDraft] = {}
        self.prescriptions.on_dispense = self.open_draft_for

    @classmethod
    def create(cls, seed: bool = True) -> "PharmacyDesk":
        inventory = InventoryLedger(seed_data.demo_medicines() if seed else ())
        billing = BillingEngine(seed_data.demo_bills() if seed else (), price_lookup=inventory.price_of)
        prescriptions = PrescriptionWorkflow(seed_data.demo_registry() if seed else ())
        return cls(inventory, billing, prescriptions)

    def open_draft_for(self, event: DispenseRequested) -> BillDraft:
        draft = self.billing.new_draft(patient_name=event.patient)
        for name in event.medicines:
            try:
                draft.add_item(name, 1)
            except ValidationError as e:
                # Not in the catalog; the pharmacist prices it by hand
                logger.warning("Skipped %s on draft for %s: %s", name, event.pid, e.message)
        self.drafts[event.prescription_id] = draft
        logger.info("Opened bill draft for %s with %d item(s)", event.patient, len(draft.items))
        return draft

    def draft_for(self, prescription_id: str) -> BillDraft:
        draft = self.drafts.get(prescription_id)
        if draft is None:
            raise NotFound(f"No open bill draft for prescription {prescription_id}")
        return draft

    def checkout_draft(self, prescription_id: str, patient_name: Optional[str] = None) -> BillDraft:
        draft = self.draft_for(prescription_id)
        draft.checkout(patient_name)
        return draft

    def pay_draft(self, prescription_id: str, payment_type: str) -> Bill:
        bill = self.billing.pay(self.draft_for(prescription_id), payment_type)
        del self.drafts[prescription_id]
        return bill

    def discard_draft(self, prescription_id: str) -> None:
        self.draft_for(prescription_id).discard()
        del self.drafts[prescription_id]
        logger.info("Discarded bill draft for prescription %s", prescription_id)
