from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from decimal import Decimal, InvalidOperation
import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from config import LOW_STOCK_THRESHOLD
from errors import ValidationError

StockStatus = Literal["in-stock", "low-stock", "out-of-stock"]
PaymentType = Literal["cash", "online"]
PrescriptionStatus = Literal["pending", "dispensed"]

PAYMENT_TYPES = ("cash", "online")


def stock_status(stock: int) -> StockStatus:
    if stock <= 0:
        return "out-of-stock"
    if stock <= LOW_STOCK_THRESHOLD:
        return "low-stock"
    return "in-stock"


def _blank(value: Any) -> bool:
    return value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip())


def parse_int(value: Any, field: str = "quantity") -> int:
    """Whole number from a form field (text or number)."""
    if _blank(value):
        raise ValidationError(f"{field} is required")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be a whole number")
        value = int(value)
    try:
        qty = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be a whole number")
    return qty


def parse_quantity(value: Any, field: str = "quantity") -> int:
    qty = parse_int(value, field)
    if qty < 0:
        raise ValidationError(f"{field} cannot be negative")
    return qty


def parse_price(value: Any, field: str = "price") -> Decimal:
    if _blank(value):
        raise ValidationError(f"{field} is required")
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not price.is_finite():
        raise ValidationError(f"{field} must be a number")
    if price < 0:
        raise ValidationError(f"{field} cannot be negative")
    return price


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Medicine(Record):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    stock: int = Field(ge=0)
    price: Decimal = Field(ge=0)

    @computed_field
    @property
    def status(self) -> StockStatus:
        return stock_status(self.stock)


class RequestCartItem(Record):
    medicine_id: str
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)


class BillItem(Record):
    model_config = ConfigDict(frozen=True)

    medicine: str
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Bill(Record):
    model_config = ConfigDict(frozen=True)

    id: str
    bill_no: str
    patient_name: str
    payment_type: PaymentType
    amount: Decimal
    date: dt.date
    items: Tuple[BillItem, ...]


class PrescribedMedicine(Record):
    name: str
    dosage: str
    frequency: str
    duration: str


class Prescription(Record):
    id: str
    pid: str
    patient: str
    doctor: str
    date: dt.date
    status: PrescriptionStatus = "pending"
    medicines: List[PrescribedMedicine] = []


class DispenseRequested(Record):
    """Handed to the billing side when a prescription leaves the pharmacy."""

    prescription_id: str
    pid: str
    patient: str
    medicines: List[str]


class TopMedicine(Record):
    name: str
    quantity: int
    revenue: Decimal


class SalesSummary(Record):
    total_revenue: Decimal
    total_sales: int
    revenue_by_payment: Dict[str, Decimal]
    medicines_in_stock: int
    patients_served: int
    top_medicines: List[TopMedicine] = []


class BillDraftOut(Record):
    patient_name: str
    state: str
    items: List[BillItem]
    total: Decimal

    @classmethod
    def from_draft(cls, draft) -> "BillDraftOut":
        return cls(patient_name=draft.patient_name, state=draft.state.value, items=draft.items, total=draft.total)


class DispenseOut(Record):
    prescription: Prescription
    draft: Optional[BillDraftOut] = None


class AnalyticsOut(Record):
    summary: SalesSummary
    alerts: List[Medicine]


# Request bodies for the HTTP layer. Numeric form fields arrive as text or
# numbers and are validated by the ledger, not here.

class MedicineIn(Record):
    name: str = ""
    quantity: Optional[Union[int, str]] = None
    price: Optional[Union[Decimal, str]] = None


class MedicinePatch(Record):
    name: Optional[str] = None
    stock: Optional[Union[int, str]] = None
    price: Optional[Union[Decimal, str]] = None


class QuantityIn(Record):
    quantity: Union[int, str]


class BillItemIn(Record):
    medicine: str
    quantity: int = 1
    price: Optional[Decimal] = None


class CheckoutIn(Record):
    patient_name: Optional[str] = None


class PaymentIn(Record):
    payment_type: str = ""


class BillIn(Record):
    patient_name: str = ""
    payment_type: str = ""
    items: List[BillItemIn] = []
