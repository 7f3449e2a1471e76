from __future__ import annotations

from fastapi import APIRouter, Depends

from verifyhub.api.schemas.exchange import ExchangeRequest, ExchangeResponse
from verifyhub.application.services.exchange_service import ExchangeService

router = APIRouter()


def get_exchange_service() -> ExchangeService:
    return ExchangeService()


@router.post("/", response_model=ExchangeResponse, response_model_exclude_none=True)
async def exchange_code(
    payload: ExchangeRequest | None = None,
    service: ExchangeService = Depends(get_exchange_service),
):
    payload = payload or ExchangeRequest()
    result = await service.exchange(
        code=payload.code,
        redirect_uri=payload.redirect_uri,
        server_id=payload.server_id,
    )
    return ExchangeResponse(**result)
