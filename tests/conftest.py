from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if _SRC.exists():
    sys.path.insert(0, str(_SRC))


@pytest.fixture
def complete_answers() -> Dict[str, Any]:
    """Every required field filled in, acceptance split 40/30/30."""
    return {
        "dbaName": "Green Leaf Goods",
        "legalName": "Green Leaf Goods LLC",
        "corpStructure": "Limited Liability Company (LLC, Ltd, LC, PLLC)",
        "industry": "Subscription Boxes",
        "websiteUrl": "https://greenleaf.example",
        "gateway": "NMI",
        "legalAddr1": "100 Main St",
        "legalCity": "Austin",
        "legalState": "TX",
        "legalZip": "78701",
        "locAddr1": "200 Congress Ave",
        "locCity": "Austin",
        "locState": "TX",
        "locZip": "78701",
        "firstName": "Sam",
        "lastName": "Rivera",
        "phone": "512-555-0100",
        "email": "sam@greenleaf.example",
        "vmdMonthly": "12,500.00",
        "amexMonthly": "1,000",
        "internetPct": "40",
        "retailPct": "30",
        "keyedPct": "30",
    }
