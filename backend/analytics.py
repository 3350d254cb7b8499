from typing import Dict, Iterable, List
from collections import defaultdict
from decimal import Decimal

from schemas import PAYMENT_TYPES, Bill, Medicine, SalesSummary, TopMedicine


def sales_summary(bills: Iterable[Bill], medicines: Iterable[Medicine], top: int = 5) -> SalesSummary:
    bills = list(bills)
    revenue_by_payment: Dict[str, Decimal] = {p: Decimal("0") for p in PAYMENT_TYPES}
    sold: Dict[str, int] = defaultdict(int)
    earned: Dict[str, Decimal] = defaultdict(Decimal)

    for bill in bills:
        revenue_by_payment[bill.payment_type] += bill.amount
        for item in bill.items:
            sold[item.medicine] += item.quantity
            earned[item.medicine] += item.line_total

    ranked = sorted(sold, key=lambda name: (-sold[name], name))[:top]
    return SalesSummary(
        total_revenue=sum(revenue_by_payment.values(), Decimal("0")),
        total_sales=len(bills),
        revenue_by_payment=revenue_by_payment,
        medicines_in_stock=sum(m.stock for m in medicines),
        patients_served=len({b.patient_name.strip().lower() for b in bills}),
        top_medicines=[TopMedicine(name=n, quantity=sold[n], revenue=earned[n]) for n in ranked],
    )


def stock_alerts(medicines: Iterable[Medicine]) -> List[Medicine]:
    """Medicines that need restocking, empty shelves first."""
    alerts = [m for m in medicines if m.status != "in-stock"]
    return sorted(alerts, key=lambda m: m.stock)
