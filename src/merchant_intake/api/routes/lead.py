from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from merchant_intake.api import crm_webhook, supabase_client
from merchant_intake.api.models import ErrorResponse, LeadAccepted
from merchant_intake.api.utils import error_body, new_request_id
from merchant_intake.record import build_submission_record

logger = logging.getLogger(__name__)

router = APIRouter(tags=["lead"])


@router.post(
    "/api/lead",
    response_model=LeadAccepted,
    responses={500: {"model": ErrorResponse}},
    description="Store a merchant application, then relay it to the CRM webhook.",
)
async def submit_lead(request: Request) -> Any:
    request_id = new_request_id("lead")
    # Unparsable or non-object bodies fall through to the app's 500 handler.
    body = await request.json()
    if not isinstance(body, dict):
        raise ValueError(f"lead body must be a JSON object, got {type(body).__name__}")

    record = build_submission_record(body)
    try:
        await supabase_client.insert_merchant_application(record)
    except supabase_client.PersistenceError as exc:
        logger.error("requestId=%s database error: %s", request_id, exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("database_error", "Database error", request_id),
        )

    # Stored already; a CRM failure only flips the flag.
    crm_forwarded = await crm_webhook.forward_to_crm(body)
    if not crm_forwarded:
        logger.warning("requestId=%s lead stored but not forwarded to CRM", request_id)

    return JSONResponse(
        status_code=200,
        content={"success": True, "crmForwarded": crm_forwarded, "requestId": request_id},
    )
