from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from potluck.core.context import AppContext
from potluck.repositories.base import StorageError
from potluck.services.rsvp_service import NameRequiredError, RsvpService, UnauthorizedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rsvps", tags=["rsvps"])


class RsvpIn(BaseModel):
    name: Optional[str] = None
    attending: bool = False
    dish: Optional[str] = None


def _get_context(request: Request) -> AppContext:
    ctx = getattr(getattr(request.app, "state", None), "context", None)
    if not ctx:
        raise RuntimeError("AppContext not configured")
    return ctx


def _get_rsvp_service(request: Request) -> RsvpService:
    return _get_context(request).rsvp_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.get("")
def list_rsvps(request: Request):
    svc = _get_rsvp_service(request)
    try:
        records = svc.list_all()
    except StorageError:
        logger.exception("Failed to fetch RSVPs")
        return _error(500, "Failed to fetch RSVPs")
    return [record.to_dict() for record in records]


@router.get("/stats")
def rsvp_stats(request: Request):
    svc = _get_rsvp_service(request)
    try:
        summary = svc.summary()
    except StorageError:
        logger.exception("Failed to compute RSVP stats")
        return _error(500, "Failed to fetch RSVPs")
    return summary.to_dict()


@router.post("")
def upsert_rsvp(payload: RsvpIn, request: Request):
    svc = _get_rsvp_service(request)
    try:
        result = svc.upsert(payload.name, payload.attending, payload.dish)
    except NameRequiredError:
        return _error(400, "Name is required")
    except StorageError:
        logger.exception("Failed to save RSVP")
        return _error(500, "Failed to save RSVP")
    return JSONResponse(
        {"success": True, "updated": result.updated},
        status_code=201 if result.created else 200,
    )


@router.delete("")
def wipe_rsvps(request: Request, x_admin_password: Optional[str] = Header(None)):
    ctx = _get_context(request)
    try:
        ctx.rsvp_service.wipe_all(x_admin_password, ctx.settings.admin_password)
    except UnauthorizedError:
        return _error(401, "Unauthorized")
    except StorageError:
        logger.exception("Failed to wipe RSVPs")
        return _error(500, "Failed to wipe RSVPs")
    return {"success": True}
