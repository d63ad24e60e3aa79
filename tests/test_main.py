"""Application wiring tests"""

import pytest

from app.engine.errors import (
    AlreadyConfirmed,
    BlockConflict,
    NotFound,
    OvenConflict,
    PermissionDenied,
    SlotBlocked,
    TableConflict,
    ValidationError,
)
from app.main import status_code_for


@pytest.mark.parametrize(
    "error,status_code",
    [
        (TableConflict([3]), 409),
        (OvenConflict(), 409),
        (SlotBlocked("ordinary_general_meeting", "both"), 409),
        (BlockConflict("ordinary_general_meeting", "midday"), 409),
        (PermissionDenied("no"), 403),
        (NotFound("gone"), 404),
        (AlreadyConfirmed(), 400),
        (ValidationError("bad", field="tables"), 400),
    ],
)
def test_status_codes(error, status_code):
    assert status_code_for(error) == status_code


def test_error_body_carries_details():
    assert TableConflict([3, 1, 3]).to_dict() == {
        "error": "TableConflict",
        "message": "Tables 1, 3 are already booked for this slot",
        "conflicting_tables": [1, 3],
    }


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
