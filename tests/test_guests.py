"""
Tests for guest sign-up through link tokens and guest list management
"""

from datetime import datetime

import pytest

from conftest import auth_header, create_event
from groupbook_api.app.core.errors import RegistrationClosed
from groupbook_api.app.core.security import token_claims
from groupbook_api.app.schemas.guest import GuestCreate
from groupbook_api.app.services.guest_service import GuestService


def _add_guest(client, link_token, **fields):
    payload = {"name": "Sam"}
    payload.update(fields)
    response = client.post(f"/api/events/public/{link_token}/guests", json=payload)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def event(client, owner):
    return create_event(client, owner["token"])["event"]


def test_full_booking_flow(client):
    registered = client.post(
        "/api/auth/register",
        json={"email": "owner@goodfork.com", "password": "secret1", "display_name": "The Good Fork"},
    ).json()
    assert registered["return_code"] == "SUCCESS"

    logged_in = client.post("/api/auth/login", json={"email": "owner@goodfork.com", "password": "secret1"}).json()
    assert logged_in["return_code"] == "SUCCESS"
    assert logged_in["token"] != registered["token"]
    assert token_claims(logged_in["token"])["account_id"] == token_claims(registered["token"])["account_id"]
    headers = auth_header(logged_in["token"])

    created = client.post(
        "/api/events",
        json={"event_name": "Christmas party", "event_date_time": "2030-12-19T19:30:00"},
        headers=headers,
    ).json()
    assert created["return_code"] == "SUCCESS"
    link_token = created["event"]["link_token"]

    public = client.get(f"/api/events/public/{link_token}").json()
    assert public["return_code"] == "SUCCESS"
    assert public["event"]["event_name"] == "Christmas party"

    added = _add_guest(client, link_token, food_order="Turkey", dietary_notes="No nuts")
    assert added["return_code"] == "SUCCESS"
    assert added["guest"]["event_id"] == created["event"]["id"]

    guests = client.get(f"/api/events/{created['event']['id']}/guests", headers=headers).json()
    assert guests["return_code"] == "SUCCESS"
    assert [(g["name"], g["food_order"], g["dietary_notes"]) for g in guests["guests"]] == [
        ("Sam", "Turkey", "No nuts")
    ]


def test_add_guest_trims_and_blanks_optional_fields(client, event):
    guest = _add_guest(client, event["link_token"], name="  Sam  ", food_order="  ", dietary_notes=None)["guest"]
    assert guest["name"] == "Sam"
    assert guest["food_order"] is None
    assert guest["dietary_notes"] is None
    assert guest["created_at"].endswith(("Z", "+00:00"))


@pytest.mark.parametrize("payload", [{"name": ""}, {"name": "   "}, {"name": None}, {"name": 5}, {}])
def test_add_guest_requires_name(client, event, payload):
    body = client.post(f"/api/events/public/{event['link_token']}/guests", json=payload).json()
    assert body["return_code"] == "MISSING_FIELDS"


@pytest.mark.parametrize("payload", [{"name": "Sam"}, {"name": " "}, {"name": None}, {"name": 5}, {}])
def test_add_guest_unknown_link(client, payload):
    body = client.post("/api/events/public/does-not-exist/guests", json=payload).json()
    assert body["return_code"] == "NOT_FOUND"


def test_add_guest_without_body(client, event):
    assert client.post("/api/events/public/does-not-exist/guests").json()["return_code"] == "NOT_FOUND"
    body = client.post(f"/api/events/public/{event['link_token']}/guests").json()
    assert body["return_code"] == "MISSING_FIELDS"


def test_add_guest_to_locked_event(client, owner, event):
    client.put(f"/api/events/{event['id']}/lock", json={"is_locked": True}, headers=auth_header(owner["token"]))
    assert _add_guest(client, event["link_token"])["return_code"] == "REGISTRATION_LOCKED"


def test_add_guest_after_cutoff(client, owner):
    event = create_event(client, owner["token"], cutoff_datetime="2020-01-01T12:00:00")["event"]
    assert _add_guest(client, event["link_token"])["return_code"] == "REGISTRATION_CLOSED"


def test_locked_takes_precedence_over_cutoff(client, owner):
    event = create_event(client, owner["token"], cutoff_datetime="2020-01-01T12:00:00")["event"]
    client.put(f"/api/events/{event['id']}/lock", json={"is_locked": True}, headers=auth_header(owner["token"]))
    assert _add_guest(client, event["link_token"])["return_code"] == "REGISTRATION_LOCKED"


def test_cutoff_compared_against_current_time(db, client, owner):
    event = create_event(client, owner["token"], cutoff_datetime="2030-06-01T12:00:00")["event"]
    before = GuestService.add_guest(db, event["link_token"], GuestCreate(name="Sam"), now=datetime(2030, 6, 1, 11, 59))
    assert before.name == "Sam"
    with pytest.raises(RegistrationClosed):
        GuestService.add_guest(db, event["link_token"], GuestCreate(name="Priya"), now=datetime(2030, 6, 1, 12, 1))


def test_guest_list_in_signup_order(client, owner, event):
    for name in ("Sam", "Priya", "Jo"):
        _add_guest(client, event["link_token"], name=name)
    guests = client.get(f"/api/events/{event['id']}/guests", headers=auth_header(owner["token"])).json()["guests"]
    assert [guest["name"] for guest in guests] == ["Sam", "Priya", "Jo"]


def test_guest_list_other_owner_forbidden(client, other_owner, event):
    _add_guest(client, event["link_token"])
    body = client.get(f"/api/events/{event['id']}/guests", headers=auth_header(other_owner["token"])).json()
    assert body["return_code"] == "FORBIDDEN"
    assert "guests" not in body


def test_guest_list_unknown_event(client, owner):
    body = client.get("/api/events/999/guests", headers=auth_header(owner["token"])).json()
    assert body["return_code"] == "NOT_FOUND"


def test_remove_guest(client, owner, event):
    guest = _add_guest(client, event["link_token"])["guest"]
    headers = auth_header(owner["token"])
    body = client.delete(f"/api/events/{event['id']}/guests/{guest['id']}", headers=headers).json()
    assert body["return_code"] == "SUCCESS"
    assert client.get(f"/api/events/{event['id']}/guests", headers=headers).json()["guests"] == []
    again = client.delete(f"/api/events/{event['id']}/guests/{guest['id']}", headers=headers).json()
    assert again["return_code"] == "NOT_FOUND"


def test_remove_guest_of_another_event(client, owner, event):
    other_event = create_event(client, owner["token"], event_name="Other")["event"]
    guest = _add_guest(client, other_event["link_token"])["guest"]
    body = client.delete(
        f"/api/events/{event['id']}/guests/{guest['id']}",
        headers=auth_header(owner["token"]),
    ).json()
    assert body["return_code"] == "NOT_FOUND"


def test_remove_guest_other_owner_forbidden(client, other_owner, event):
    guest = _add_guest(client, event["link_token"])["guest"]
    body = client.delete(
        f"/api/events/{event['id']}/guests/{guest['id']}",
        headers=auth_header(other_owner["token"]),
    ).json()
    assert body["return_code"] == "FORBIDDEN"


def test_public_guest_count_tracks_signups(client, event):
    _add_guest(client, event["link_token"], name="Sam")
    _add_guest(client, event["link_token"], name="Priya")
    public = client.get(f"/api/events/public/{event['link_token']}").json()["event"]
    assert public["guest_count"] == 2
