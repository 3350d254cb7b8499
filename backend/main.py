from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import List

from analytics import sales_summary, stock_alerts
from config import APP_TITLE, CORS_ORIGINS, SEED_DEMO_DATA, configure_logging
from desk import PharmacyDesk
from errors import NotFound, ValidationError
from schemas import (
    AnalyticsOut, Bill, BillDraftOut, BillIn, BillItemIn, CheckoutIn, DispenseOut, Medicine, MedicineIn, MedicinePatch,
    PaymentIn, Prescription, QuantityIn, RequestCartItem,
)

configure_logging()

app = FastAPI(title=APP_TITLE)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.desk = PharmacyDesk.create(seed=SEED_DEMO_DATA)


def get_desk(request: Request) -> PharmacyDesk:
    return request.app.state.desk


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.get("/test")
async def test():
    return {"ok": True, "message": "Desk ready"}


# inventory

@app.get("/medicines", response_model=List[Medicine])
async def list_medicines(q: str = "", limit: int = 100, desk: PharmacyDesk = Depends(get_desk)):
    return list(desk.inventory.search(q).limit(limit))


@app.post("/medicines", response_model=Medicine)
async def add_medicine(m: MedicineIn, desk: PharmacyDesk = Depends(get_desk)):
    return desk.inventory.add_medicine(m.name, m.quantity, m.price)


@app.patch("/medicines/{medicine_id}", response_model=Medicine)
async def update_medicine(medicine_id: str, m: MedicinePatch, desk: PharmacyDesk = Depends(get_desk)):
    return desk.inventory.update_medicine(medicine_id, name=m.name, stock=m.stock, price=m.price)


@app.delete("/medicines/{medicine_id}")
async def delete_medicine(medicine_id: str, desk: PharmacyDesk = Depends(get_desk)):
    desk.inventory.delete_medicine(medicine_id)
    return {"ok": True}


@app.post("/medicines/{medicine_id}/refill", response_model=RequestCartItem)
async def refill_medicine(medicine_id: str, body: QuantityIn, desk: PharmacyDesk = Depends(get_desk)):
    return desk.inventory.refill(medicine_id, body.quantity)


@app.get("/cart", response_model=List[RequestCartItem])
async def get_cart(desk: PharmacyDesk = Depends(get_desk)):
    return desk.inventory.cart


@app.put("/cart/{medicine_id}", response_model=List[RequestCartItem])
async def set_cart_quantity(medicine_id: str, body: QuantityIn, desk: PharmacyDesk = Depends(get_desk)):
    desk.inventory.set_cart_quantity(medicine_id, body.quantity)
    return desk.inventory.cart


@app.delete("/cart/{medicine_id}", response_model=List[RequestCartItem])
async def remove_from_cart(medicine_id: str, desk: PharmacyDesk = Depends(get_desk)):
    desk.inventory.remove_from_cart(medicine_id)
    return desk.inventory.cart


@app.delete("/cart", response_model=List[RequestCartItem])
async def clear_cart(desk: PharmacyDesk = Depends(get_desk)):
    desk.inventory.clear_cart()
    return desk.inventory.cart


# billing

@app.get("/bills", response_model=List[Bill])
async def list_bills(q: str = "", limit: int = 100, desk: PharmacyDesk = Depends(get_desk)):
    return list(desk.billing.search(q).limit(limit))


@app.post("/bills/draft", response_model=BillDraftOut)
async def preview_bill(items: List[BillItemIn], desk: PharmacyDesk = Depends(get_desk)):
    draft = desk.billing.build_draft([i.model_dump() for i in items])
    return BillDraftOut.from_draft(draft)


@app.post("/bills", response_model=Bill)
async def create_bill(b: BillIn, desk: PharmacyDesk = Depends(get_desk)):
    draft = desk.billing.build_draft([i.model_dump() for i in b.items])
    return desk.billing.finalize(b.patient_name, draft.items, b.payment_type)


@app.get("/bills/{bill_id}", response_model=Bill)
async def get_bill(bill_id: str, desk: PharmacyDesk = Depends(get_desk)):
    return desk.billing.get(bill_id)


# prescriptions

@app.get("/prescriptions", response_model=List[Prescription])
async def list_prescriptions(q: str = "", limit: int = 100, desk: PharmacyDesk = Depends(get_desk)):
    return list(desk.prescriptions.search(q).limit(limit))


@app.get("/prescriptions/by-pid/{pid}", response_model=Prescription)
async def find_prescription(pid: str, desk: PharmacyDesk = Depends(get_desk)):
    found = desk.prescriptions.find_by_pid(pid)
    if found is None:
        raise HTTPException(status_code=404, detail="No prescription found for this PID.")
    return found


@app.post("/prescriptions/{prescription_id}/dispense", response_model=DispenseOut)
async def dispense_prescription(prescription_id: str, desk: PharmacyDesk = Depends(get_desk)):
    prescription = desk.prescriptions.dispense(prescription_id)
    draft = desk.drafts.get(prescription_id)
    return DispenseOut(prescription=prescription, draft=None if draft is None else BillDraftOut.from_draft(draft))


@app.get("/prescriptions/{prescription_id}/draft", response_model=BillDraftOut)
async def get_prescription_draft(prescription_id: str, desk: PharmacyDesk = Depends(get_desk)):
    return BillDraftOut.from_draft(desk.draft_for(prescription_id))


@app.put("/prescriptions/{prescription_id}/draft/items/{index}", response_model=BillDraftOut)
async def set_draft_quantity(prescription_id: str, index: int, body: QuantityIn,
                             desk: PharmacyDesk = Depends(get_desk)):
    draft = desk.draft_for(prescription_id)
    draft.set_quantity(index, body.quantity)
    return BillDraftOut.from_draft(draft)


@app.delete("/prescriptions/{prescription_id}/draft/items/{index}", response_model=BillDraftOut)
async def remove_draft_item(prescription_id: str, index: int, desk: PharmacyDesk = Depends(get_desk)):
    draft = desk.draft_for(prescription_id)
    draft.remove_item(index)
    return BillDraftOut.from_draft(draft)


@app.post("/prescriptions/{prescription_id}/draft/checkout", response_model=BillDraftOut)
async def checkout_draft(prescription_id: str, body: CheckoutIn, desk: PharmacyDesk = Depends(get_desk)):
    return BillDraftOut.from_draft(desk.checkout_draft(prescription_id, body.patient_name))


@app.post("/prescriptions/{prescription_id}/draft/pay", response_model=Bill)
async def pay_draft(prescription_id: str, body: PaymentIn, desk: PharmacyDesk = Depends(get_desk)):
    return desk.pay_draft(prescription_id, body.payment_type)


@app.delete("/prescriptions/{prescription_id}/draft")
async def discard_draft(prescription_id: str, desk: PharmacyDesk = Depends(get_desk)):
    desk.discard_draft(prescription_id)
    return {"ok": True}


@app.delete("/prescriptions/{prescription_id}")
async def delete_prescription(prescription_id: str, desk: PharmacyDesk = Depends(get_desk)):
    desk.prescriptions.delete(prescription_id)
    return {"ok": True}


# analytics

@app.get("/analytics/summary", response_model=AnalyticsOut)
async def analytics_summary(desk: PharmacyDesk = Depends(get_desk)):
    return AnalyticsOut(
        summary=sales_summary(desk.billing.bills, desk.inventory.medicines),
        alerts=stock_alerts(desk.inventory.medicines),
    )
