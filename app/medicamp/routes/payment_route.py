from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pymongo.database import Database

from medicamp.constant_file import MAX_PAGE, MAX_PAGE_SIZE
from medicamp.controller import payment_gateway
from medicamp.controller.participant_controller import retrieve_participant_controller
from medicamp.controller.payment_controller import add_payment_controller
from medicamp.controller.report_controller import count_payment_history, retrieve_payment_history
from medicamp.database import get_db
from medicamp.models.participant_model import PaymentStatus
from medicamp.models.payment_model import PaymentCreate, PaymentIntentRequest
from medicamp.security import FORBIDDEN, Identity, verify_owner, verify_token

router = APIRouter()


# ----------------------- Payment intent -----------------------
@router.post("/create-payment-intent", response_description="Start a charge with the payment processor")
async def create_payment_intent(body: PaymentIntentRequest, _: Identity = Depends(verify_token)):
    return await payment_gateway.create_payment_intent(body.price)


# ----------------------- Add Payment -----------------------
@router.post("/payments", response_description="Record a confirmed payment")
async def add_payment(payment: PaymentCreate, db: Database = Depends(get_db),
                      identity: Identity = Depends(verify_token)):
    if payment.email != identity.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)

    registration = await retrieve_participant_controller(db, payment.campId)
    if not registration:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"Registration with id {payment.campId} does not exist.")
    if registration.get("participantEmail") != identity.email:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN)
    if registration.get("paymentStatus") == PaymentStatus.PAID.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Registration is already paid.")

    report = await add_payment_controller(db, jsonable_encoder(payment))
    if not report.completed:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=report.to_dict())
    return report.to_dict()


# ----------------------- History -----------------------
@router.get("/payment-history/{email}", response_description="Payments joined to their registrations")
async def get_payment_history(
    email: str,
    search: Optional[str] = None,
    page: int = Query(0, ge=0, le=MAX_PAGE),
    size: int = Query(0, ge=0, le=MAX_PAGE_SIZE),
    db: Database = Depends(get_db),
    _: Identity = Depends(verify_owner),
):
    return await retrieve_payment_history(db, email, search, page, size)


@router.get("/history-count", response_description="Number of payment history rows")
async def get_history_count(email: str, search: Optional[str] = None, db: Database = Depends(get_db),
                            _: Identity = Depends(verify_owner)):
    return {"count": await count_payment_history(db, email, search)}


__all__ = ["router"]
