# medicaledu/routers/promo_codes.py
from typing import List

from fastapi import APIRouter, Depends, Query, status

from medicaledu.core.application.features.promo_codes.models import PromoCodeResponse
from medicaledu.core.application.features.promo_codes.requests import (
    CreatePromoCodeCommand,
    GetPromoCodeQuery,
    GetPromoCodesQuery,
    SetPromoCodeActiveCommand,
)
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import found, get_mediator, unwrap

router = APIRouter(prefix="/promo-codes", tags=["promo-codes"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a promo code")
async def create_promo_code(
    command: CreatePromoCodeCommand, mediator: Mediator = Depends(get_mediator)
) -> PromoCodeResponse:
    return unwrap(await mediator.send(command))


@router.get("", summary="List promo codes")
async def list_promo_codes(
    active_only: bool = Query(False, alias="activeOnly"), mediator: Mediator = Depends(get_mediator)
) -> List[PromoCodeResponse]:
    return await mediator.send(GetPromoCodesQuery(active_only=active_only))


@router.get("/{code}", summary="Look up a promo code")
async def get_promo_code(code: str, mediator: Mediator = Depends(get_mediator)) -> PromoCodeResponse:
    return found(await mediator.send(GetPromoCodeQuery(code=code)), "PromoCode", code)


@router.post("/{code}/activate", summary="Re-enable a promo code")
async def activate_promo_code(code: str, mediator: Mediator = Depends(get_mediator)) -> PromoCodeResponse:
    return unwrap(await mediator.send(SetPromoCodeActiveCommand(code=code, is_active=True)))


@router.post("/{code}/deactivate", summary="Disable a promo code")
async def deactivate_promo_code(code: str, mediator: Mediator = Depends(get_mediator)) -> PromoCodeResponse:
    return unwrap(await mediator.send(SetPromoCodeActiveCommand(code=code, is_active=False)))
