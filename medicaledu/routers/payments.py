# medicaledu/routers/payments.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from medicaledu.core.application.features.payments.models import PaymentResponse
from medicaledu.core.application.features.payments.requests import (
    CancelPaymentCommand,
    CreatePaymentCommand,
    GetPaymentByIdQuery,
    GetPaymentsByUserQuery,
    MarkPaymentFailedCommand,
    MarkPaymentSucceededCommand,
    RefundPaymentCommand,
)
from medicaledu.core.application.mediator import Mediator
from medicaledu.core.domain.enums import PaymentStatus
from medicaledu.routers.dependencies import found, get_mediator, unwrap
from medicaledu.schemas.payments import PaymentFailureBody, RefundBody

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record a payment for a booking")
async def create_payment(command: CreatePaymentCommand, mediator: Mediator = Depends(get_mediator)) -> PaymentResponse:
    return unwrap(await mediator.send(command))


@router.get("/users/{user_id}", summary="Payments made by a user")
async def list_user_payments(
    user_id: UUID,
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    mediator: Mediator = Depends(get_mediator),
) -> List[PaymentResponse]:
    return await mediator.send(GetPaymentsByUserQuery(user_id=user_id, status=payment_status))


@router.get("/{payment_id}", summary="Get a payment")
async def get_payment(payment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> PaymentResponse:
    return found(await mediator.send(GetPaymentByIdQuery(payment_id=payment_id)), "Payment", payment_id)


@router.post("/{payment_id}/succeed", summary="Mark a payment as succeeded")
async def mark_succeeded(payment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> PaymentResponse:
    return unwrap(await mediator.send(MarkPaymentSucceededCommand(payment_id=payment_id)))


@router.post("/{payment_id}/fail", summary="Mark a payment as failed")
async def mark_failed(
    payment_id: UUID, payload: PaymentFailureBody, mediator: Mediator = Depends(get_mediator)
) -> PaymentResponse:
    return unwrap(await mediator.send(MarkPaymentFailedCommand(payment_id=payment_id, reason=payload.reason)))


@router.post("/{payment_id}/cancel", summary="Cancel a payment")
async def cancel_payment(payment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> PaymentResponse:
    return unwrap(await mediator.send(CancelPaymentCommand(payment_id=payment_id)))


@router.post("/{payment_id}/refund", summary="Refund all or part of a payment")
async def refund_payment(
    payment_id: UUID, payload: RefundBody, mediator: Mediator = Depends(get_mediator)
) -> PaymentResponse:
    return unwrap(
        await mediator.send(RefundPaymentCommand(payment_id=payment_id, reason=payload.reason, amount=payload.amount))
    )
