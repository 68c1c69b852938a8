"""Manual trigger endpoint for the dispatch pass."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from notification_dispatcher.core.exceptions import InternalServerException

from .dependencies import DispatchServiceDep
from .schemas import DispatchSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post(
    "/dispatch",
    response_model=DispatchSummary,
    status_code=status.HTTP_200_OK,
    summary="Run one dispatch pass now",
    description=(
        "Synchronously processes the current batch of due notifications and "
        "returns how many were processed, delivered and failed. Only POST is accepted."
    ),
)
async def dispatch_notifications(service: DispatchServiceDep) -> DispatchSummary:
    try:
        return await service.run_once()
    except Exception as exc:
        logger.exception("Manual dispatch pass failed")
        raise InternalServerException(
            detail="Processing failed",
            type="dispatch-failed",
        ) from exc
