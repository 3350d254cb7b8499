from typing import Any, Iterable, List, Optional
from decimal import Decimal
import logging

from database import Collection, Cursor, new_id
from errors import NotFound, ValidationError
from schemas import Medicine, RequestCartItem, parse_int, parse_price, parse_quantity

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Medicine catalog plus the request cart that collects refills."""

    def __init__(self, medicines: Iterable[Medicine] = ()):
        self._medicines = Collection("medicines")
        self._cart = Collection("request_cart", key="medicine_id")
        for m in medicines:
            self._medicines.insert(m)

    @property
    def medicines(self) -> List[Medicine]:
        return list(self._medicines)

    def get(self, medicine_id: str) -> Medicine:
        medicine = self._medicines.get(medicine_id)
        if medicine is None:
            raise NotFound(f"Medicine {medicine_id} not found")
        return medicine

    def add_medicine(self, name: Optional[str], initial_stock: Any, unit_price: Any) -> Medicine:
        name = (name or "").strip()
        if not name:
            raise ValidationError("name is required")
        stock = parse_quantity(initial_stock, "quantity")
        price = parse_price(unit_price)

        medicine = self._medicines.insert(Medicine(id=new_id(), name=name, stock=stock, price=price))
        logger.info("Added medicine %s (%s) stock=%d status=%s",
                    medicine.name, medicine.id, medicine.stock, medicine.status)
        return medicine

    def update_medicine(self, medicine_id: str, name: Optional[str] = None, stock: Any = None,
                        price: Any = None) -> Medicine:
        medicine = self.get(medicine_id)
        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("name is required")
            changes["name"] = name.strip()
        if stock is not None:
            changes["stock"] = parse_quantity(stock, "stock")
        if price is not None:
            changes["price"] = parse_price(price)
        for key, value in changes.items():
            setattr(medicine, key, value)
        logger.info("Updated medicine %s: %s", medicine_id, sorted(changes))
        return medicine

    def refill(self, medicine_id: str, quantity: Any) -> RequestCartItem:
        """Add stock to a medicine and record the same quantity in the request cart."""
        medicine = self.get(medicine_id)
        qty = parse_quantity(quantity, "quantity")
        if qty == 0:
            logger.warning("Ignored refill of %s with non-positive quantity", medicine.name)
            raise ValidationError("refill quantity must be greater than zero")

        medicine.stock = medicine.stock + qty
        item = self._upsert_cart(medicine, qty)
        logger.info("Refilled %s by %d (stock=%d, cart=%d)", medicine.name, qty, medicine.stock, item.quantity)
        return item

    def delete_medicine(self, medicine_id: str) -> None:
        # Cart entries are snapshots and stay valid after the medicine is gone
        if not self._medicines.delete(medicine_id):
            raise NotFound(f"Medicine {medicine_id} not found")
        logger.info("Deleted medicine %s", medicine_id)

    def search(self, term: str = "") -> Cursor:
        needle = (term or "").lower()
        return self._medicines.find(lambda m: needle in m.name.lower())

    def price_of(self, name: str) -> Optional[Decimal]:
        needle = (name or "").strip().lower()
        match = self._medicines.find(lambda m: m.name.lower() == needle).first()
        return match.price if match else None

    # request cart

    @property
    def cart(self) -> List[RequestCartItem]:
        return list(self._cart)

    def add_to_cart(self, medicine_id: str, quantity: Any = 1) -> RequestCartItem:
        medicine = self.get(medicine_id)
        qty = parse_quantity(quantity, "quantity")
        if qty == 0:
            raise ValidationError("quantity must be greater than zero")
        return self._upsert_cart(medicine, qty)

    def remove_from_cart(self, medicine_id: str) -> None:
        self._cart.delete(medicine_id)

    def set_cart_quantity(self, medicine_id: str, quantity: Any) -> Optional[RequestCartItem]:
        quantity = parse_int(quantity)
        if quantity <= 0:
            self.remove_from_cart(medicine_id)
            return None
        item = self._cart.get(medicine_id)
        if item is None:
            raise NotFound(f"Medicine {medicine_id} is not in the request cart")
        item.quantity = quantity
        return item

    def clear_cart(self) -> None:
        self._cart.clear()

    def _upsert_cart(self, medicine: Medicine, quantity: int) -> RequestCartItem:
        item = self._cart.get(medicine.id)
        if item is None:
            item = self._cart.insert(RequestCartItem(
                medicine_id=medicine.id, name=medicine.name, price=medicine.price, quantity=quantity,
            ))
        else:
            item.quantity += quantity
        return item
