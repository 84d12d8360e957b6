"""Request schema validation: room, action and integration payloads.

Invariants:
    - Names are stripped and capped at 20 chars
    - Room codes are upper-cased before lookup
    - Unknown actions pass the schema (rejected later by the dispatcher)
"""

import pytest
from pydantic import ValidationError

from guesso.schemas.action import ActionRequest
from guesso.schemas.integration import EntitlementRequest, VerificationRequest
from guesso.schemas.room import RoomCreate, RoomJoin


# --- Rooms --------------------------------------------------------------------

def test_host_name_is_stripped():
    assert RoomCreate(host_name="  Aki ").host_name == "Aki"


@pytest.mark.parametrize("name", ["   ", "x" * 21])
def test_host_name_rejected(name):
    with pytest.raises(ValidationError):
        RoomCreate(host_name=name)


def test_join_normalizes_code():
    body = RoomJoin(room_code=" abcdef", name="Ren")
    assert body.room_code == "ABCDEF"
    assert body.name == "Ren"


def test_join_rejects_blank_code():
    with pytest.raises(ValidationError):
        RoomJoin(room_code="   ", name="Ren")


# --- Actions ------------------------------------------------------------------

def test_action_fields_optional():
    req = ActionRequest(action="start-game", player_id="p1")
    assert req.theme_id is None
    assert req.gui_mode is False
    assert req.ranking is None


def test_unknown_action_passes_schema():
    assert ActionRequest(action="dance", player_id="p1").action == "dance"


@pytest.mark.parametrize("field", ["action", "player_id"])
def test_blank_required_fields_rejected(field):
    data = {"action": "start-game", "player_id": "p1", field: "  "}
    with pytest.raises(ValidationError):
        ActionRequest(**data)


# --- Integrations -------------------------------------------------------------

@pytest.mark.parametrize("code", ["1234", "9999"])
def test_verification_code_accepted(code):
    assert VerificationRequest(verification_code=code).verification_code == code


@pytest.mark.parametrize("code", ["123", "12345", "ABCD"])
def test_verification_code_rejected(code):
    with pytest.raises(ValidationError):
        VerificationRequest(verification_code=code)


def test_entitlement_normalizes_code():
    assert EntitlementRequest(room_code="abcdef").room_code == "ABCDEF"
