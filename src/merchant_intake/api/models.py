from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LeadAccepted(BaseModel):
    """Response of POST /api/lead once the lead is stored."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    crm_forwarded: bool = Field(
        ...,
        alias="crmForwarded",
        description="Whether the CRM webhook acknowledged the lead. False is a soft warning, not a failure.",
    )
    request_id: Optional[str] = Field(default=None, alias="requestId")


class ErrorResponse(BaseModel):
    """Error envelope for every non-2xx response."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str = Field(..., description="database_error | server_error")
    message: str = ""
    request_id: Optional[str] = Field(default=None, alias="requestId")
