"""Demo records the desk starts with."""
from decimal import Decimal
import datetime as dt

from billing import bill_total
from schemas import Bill, BillItem, Medicine, PrescribedMedicine, Prescription


def demo_medicines():
    return [
        Medicine(id="1", name="Paracetamol", stock=150, price=Decimal("5.00")),
        Medicine(id="2", name="Amoxicillin", stock=25, price=Decimal("12.50")),
        Medicine(id="3", name="Ibuprofen", stock=0, price=Decimal("8.00")),
        Medicine(id="4", name="Aspirin", stock=200, price=Decimal("3.50")),
    ]


def _bill(id, bill_no, patient_name, payment_type, date, items):
    items = tuple(BillItem(medicine=m, quantity=q, price=Decimal(p)) for m, q, p in items)
    return Bill(id=id, bill_no=bill_no, patient_name=patient_name, payment_type=payment_type,
                amount=bill_total(items), date=date, items=items)


def demo_bills():
    return [
        _bill("1", "B001", "John Doe", "cash", dt.date(2024, 1, 15),
              [("Paracetamol", 2, "5.00"), ("Amoxicillin", 3, "12.50")]),
        _bill("2", "B002", "Jane Smith", "online", dt.date(2024, 1, 14),
              [("Ibuprofen", 3, "8.00")]),
    ]


def demo_registry():
    return [
        Prescription(
            id="1", pid="P001", patient="John Doe", doctor="Dr. Smith", date=dt.date(2024, 1, 15),
            status="pending",
            medicines=[
                PrescribedMedicine(name="Paracetamol", dosage="500mg", frequency="Twice daily", duration="5 days"),
                PrescribedMedicine(name="Amoxicillin", dosage="250mg", frequency="Three times daily",
                                   duration="7 days"),
            ],
        ),
        Prescription(
            id="2", pid="P002", patient="Jane Smith", doctor="Dr. Johnson", date=dt.date(2024, 1, 14),
            status="dispensed",
            medicines=[
                PrescribedMedicine(name="Ibuprofen", dosage="400mg", frequency="As needed", duration="3 days"),
            ],
        ),
    ]
