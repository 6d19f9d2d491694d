from __future__ import annotations

import time
import uuid
from typing import Any, Dict


def new_request_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def error_body(error: str, message: str, request_id: str) -> Dict[str, Any]:
    # Callers get the category only; details go to the server log.
    return {
        "success": False,
        "error": error,
        "message": message,
        "requestId": request_id,
    }
