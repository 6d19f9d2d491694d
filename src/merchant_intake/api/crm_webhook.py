"""
Relay of accepted leads to the CRM (Salesforce web-to-lead style webhook).

Best effort: the caller only learns whether it worked. Nothing here raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import aiohttp

from merchant_intake.utils import env_float, env_str

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def webhook_url() -> str:
    return env_str("SALESFORCE_WEBHOOK_URL") or env_str("CRM_WEBHOOK_URL")


async def forward_to_crm(payload: Mapping[str, Any]) -> bool:
    url = webhook_url()
    if not url:
        logger.warning("CRM webhook not configured; lead not forwarded")
        return False

    timeout = aiohttp.ClientTimeout(total=env_float("CRM_WEBHOOK_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    try:
        async with aiohttp.ClientSession(timeout=timeout) as sess:
            async with sess.post(url, json=dict(payload)) as resp:
                if 200 <= resp.status < 300:
                    return True
                logger.warning("CRM webhook returned HTTP %d", resp.status)
                return False
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("CRM webhook failed: %r", exc)
        return False
