# market/payment_service/main.py
from decimal import Decimal
import time

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

app = FastAPI(title="Payment Gateway (dev mock)")

DECLINED_METHODS = {"declined_card", "expired_card"}
CHARGES: dict[int, dict] = {}


class ChargeIn(BaseModel):
    orderId: int
    amount: Decimal
    currency: str
    method: str


@app.post("/charges")
def create_charge(payload: ChargeIn):
    # same order id -> same answer
    if payload.orderId in CHARGES:
        return CHARGES[payload.orderId]

    if payload.method in DECLINED_METHODS or payload.amount <= 0:
        return JSONResponse(
            status_code=402,
            content={"status": "declined", "message": f"{payload.method} was declined"},
        )

    charge = {"status": "approved", "reference": f"mock_{payload.orderId}_{int(time.time() * 1000)}"}
    CHARGES[payload.orderId] = charge
    return charge
