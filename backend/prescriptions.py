from typing import Callable, Iterable, List, Optional
import logging

from database import Collection, Cursor
from errors import NotFound
from schemas import DispenseRequested, Prescription

logger = logging.getLogger(__name__)

DispenseListener = Callable[[DispenseRequested], None]


class PrescriptionWorkflow:
    """Prescriptions on the pharmacy desk, looked up by PID in a fixed registry.

    Status only ever moves from ``pending`` to ``dispensed``. Every dispense
    is announced to ``on_dispense`` so the caller can open a bill for it.
    """

    def __init__(self, registry: Iterable[Prescription], on_dispense: Optional[DispenseListener] = None):
        self._registry = {p.pid: p for p in registry}
        self._prescriptions = Collection("prescriptions")
        self.on_dispense = on_dispense
        self._dispensed = {p.pid for p in self._registry.values() if p.status == "dispensed"}
        for p in self._registry.values():
            self._prescriptions.insert(p.model_copy(deep=True))

    @property
    def prescriptions(self) -> List[Prescription]:
        return list(self._prescriptions)

    def get(self, prescription_id: str) -> Prescription:
        prescription = self._prescriptions.get(prescription_id)
        if prescription is None:
            raise NotFound(f"Prescription {prescription_id} not found")
        return prescription

    def find_by_pid(self, pid: str) -> Optional[Prescription]:
        """Return the prescription for ``pid``, or None when no patient matches."""
        found = self._prescriptions.find(lambda p: p.pid == pid).first()
        if found is not None:
            return found
        registered = self._registry.get(pid)
        if registered is None:
            logger.info("No prescription found for PID %s", pid)
            return None
        # A deleted registry hit comes back with the status it last had on the desk
        status = "dispensed" if pid in self._dispensed else registered.status
        found = self._prescriptions.insert(registered.model_copy(deep=True, update={"status": status}))
        logger.info("Added prescription %s for %s", found.pid, found.patient)
        return found

    def dispense(self, prescription_id: str) -> Prescription:
        prescription = self.get(prescription_id)
        if prescription.status == "dispensed":
            logger.info("Prescription %s already dispensed", prescription.pid)
            return prescription

        prescription = self._prescriptions.replace(prescription.model_copy(update={"status": "dispensed"}))
        self._dispensed.add(prescription.pid)
        logger.info("Dispensed prescription %s for %s", prescription.pid, prescription.patient)
        if self.on_dispense is not None:
            self.on_dispense(DispenseRequested(
                prescription_id=prescription.id,
                pid=prescription.pid,
                patient=prescription.patient,
                medicines=[m.name for m in prescription.medicines],
            ))
        return prescription

    def delete(self, prescription_id: str) -> None:
        if not self._prescriptions.delete(prescription_id):
            raise NotFound(f"Prescription {prescription_id} not found")
        logger.info("Deleted prescription %s", prescription_id)

    def search(self, term: str = "") -> Cursor:
        needle = (term or "").lower()
        return self._prescriptions.find(
            lambda p: needle in p.patient.lower() or needle in p.pid.lower() or needle in p.doctor.lower()
        )
