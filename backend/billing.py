from typing import Any, Callable, Iterable, List, Mapping, Optional, Union
from decimal import Decimal
from enum import Enum
import datetime as dt
import logging

from database import Collection, Cursor, new_id
from errors import NotFound, ValidationError
from schemas import PAYMENT_TYPES, Bill, BillItem, parse_int, parse_price, parse_quantity

logger = logging.getLogger(__name__)

PriceLookup = Callable[[str], Optional[Decimal]]


class DraftState(str, Enum):
    DRAFTING = "drafting"
    AWAITING_PAYMENT = "awaiting-payment"
    FINALIZED = "finalized"


def bill_total(items: Iterable[BillItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


def format_bill_no(sequence: int) -> str:
    return f"B{sequence:03d}"


class BillDraft:
    """Line items being collected for a bill that has not been paid yet.

    A draft starts in ``drafting``, moves to ``awaiting-payment`` on
    ``checkout`` and ends as ``finalized`` once ``BillingEngine.pay`` stores
    the bill. ``discard`` abandons it and leaves an empty drafting draft.
    """

    def __init__(self, price_lookup: Optional[PriceLookup] = None, patient_name: str = ""):
        self._price_lookup = price_lookup
        self.items: List[BillItem] = []
        self.patient_name = patient_name
        self.state = DraftState.DRAFTING
        self.amount: Optional[Decimal] = None

    @property
    def total(self) -> Decimal:
        return bill_total(self.items)

    def _require_drafting(self) -> None:
        if self.state is not DraftState.DRAFTING:
            raise ValidationError(f"Draft is {self.state.value} and can no longer be edited")

    def resolve_price(self, medicine: str, price: Any = None) -> Decimal:
        if price is not None:
            return parse_price(price, f"price for {medicine}")
        resolved = self._price_lookup(medicine) if self._price_lookup else None
        if resolved is None:
            raise ValidationError(f"No price known for {medicine}")
        return resolved

    def add_item(self, medicine: str, quantity: int = 1, price: Any = None) -> BillItem:
        self._require_drafting()
        if not (medicine or "").strip():
            raise ValidationError("medicine is required")
        qty = parse_quantity(quantity, f"quantity for {medicine}")
        if qty < 1:
            raise ValidationError(f"quantity for {medicine} must be at least 1")
        unit_price = self.resolve_price(medicine, price)
        item = BillItem(medicine=medicine.strip(), quantity=qty, price=unit_price)
        self.items.append(item)
        return item

    def set_quantity(self, index: int, quantity: Any) -> BillItem:
        self._require_drafting()
        quantity = parse_int(quantity)
        if quantity < 1:
            raise ValidationError("quantity must be at least 1")
        item = self._item_at(index).model_copy(update={"quantity": quantity})
        self.items[index] = item
        return item

    def remove_item(self, index: int) -> None:
        self._require_drafting()
        self._item_at(index)
        del self.items[index]

    def _item_at(self, index: int) -> BillItem:
        try:
            return self.items[index]
        except IndexError:
            raise NotFound(f"No bill item at position {index}")

    def checkout(self, patient_name: Optional[str] = None) -> Decimal:
        self._require_drafting()
        if patient_name is not None:
            self.patient_name = patient_name
        if not (self.patient_name or "").strip() or not self.items:
            raise ValidationError("Please enter patient name and add items.")
        self.amount = self.total
        self.state = DraftState.AWAITING_PAYMENT
        return self.amount

    def discard(self) -> None:
        self.items = []
        self.patient_name = ""
        self.amount = None
        self.state = DraftState.DRAFTING


class BillingEngine:
    def __init__(self, bills: Iterable[Bill] = (), price_lookup: Optional[PriceLookup] = None,
                 today: Callable[[], dt.date] = dt.date.today):
        self._bills = Collection("bills")
        self._price_lookup = price_lookup
        self._today = today
        for b in bills:
            self._bills.insert(b)

    @property
    def bills(self) -> List[Bill]:
        return list(self._bills)

    def get(self, bill_id: str) -> Bill:
        bill = self._bills.get(bill_id)
        if bill is None:
            raise NotFound(f"Bill {bill_id} not found")
        return bill

    def new_draft(self, patient_name: str = "") -> BillDraft:
        return BillDraft(self._price_lookup, patient_name)

    def build_draft(self, items: Iterable[Union[BillItem, Mapping[str, Any]]]) -> BillDraft:
        draft = self.new_draft()
        for item in items:
            if isinstance(item, BillItem):
                draft.add_item(item.medicine, item.quantity, item.price)
            else:
                draft.add_item(item.get("medicine", ""), item.get("quantity", 1), item.get("price"))
        if not draft.items:
            raise ValidationError("A bill needs at least one item")
        return draft

    def finalize(self, patient_name: Optional[str], draft_items: Iterable[BillItem], payment_type: str) -> Bill:
        items = tuple(draft_items)
        patient_name = (patient_name or "").strip()
        if not patient_name or not items:
            logger.warning("Rejected bill: patient name or items missing")
            raise ValidationError("Please enter patient name and add items.")
        if payment_type not in PAYMENT_TYPES:
            raise ValidationError(f"Unknown payment type {payment_type!r}")

        bill = Bill(
            id=new_id(),
            bill_no=format_bill_no(len(self._bills) + 1),
            patient_name=patient_name,
            payment_type=payment_type,
            amount=bill_total(items),
            date=self._today(),
            items=items,
        )
        self._bills.insert(bill)
        logger.info("Bill %s created for %s: %s paid %s", bill.bill_no, bill.patient_name, bill.amount,
                    bill.payment_type)
        return bill

    def pay(self, draft: BillDraft, payment_type: str) -> Bill:
        if draft.state is not DraftState.AWAITING_PAYMENT:
            raise ValidationError("Draft must be checked out before payment")
        bill = self.finalize(draft.patient_name, draft.items, payment_type)
        draft.state = DraftState.FINALIZED
        return bill

    def search(self, term: str = "") -> Cursor:
        needle = (term or "").lower()
        return self._bills.find(lambda b: needle in b.patient_name.lower() or needle in b.bill_no.lower())
