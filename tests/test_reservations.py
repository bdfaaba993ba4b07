import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes.public import reservations as reservations_routes
from app.models.availability_slot import AvailabilitySlot
from app.models.conversation import Conversation
from app.models.reservation import Reservation, Booking


def _payload(traveler, guide, slot=None, durations=(4,)):
    payload = {
        "traveler_id": str(traveler.id),
        "guide_id": str(guide.id),
        "sessions": [
            {"date": "2030-05-01", "start_time": "10:00", "duration_hours": d} for d in durations
        ],
        "meeting": {"type": "hotel", "address": "Carrer de Mallorca 1"},
        "itinerary_note": "Gothic quarter and tapas",
    }
    if slot is not None:
        payload["slot_id"] = str(slot.id)
    return payload


def _slot_status(db, slot_id):
    db.expire_all()
    return db.get(AvailabilitySlot, slot_id).status


def test_create_reservation_claims_slot(client, db, traveler, guide, make_slot):
    slot = make_slot(guide)

    response = client.post("/api/reservations", json=_payload(traveler, guide, slot))
    assert response.status_code == 200
    body = response.json()
    assert body["slot_reserved"] is True
    assert body["reservation"]["status"] == "pending"
    assert body["reservation"]["subtotal"] == 140
    assert body["reservation"]["total"] == 154
    assert body["reservation"]["currency"] == "USD"
    assert body["booking"]["reservation_id"] == body["reservation"]["id"]
    assert body["booking"]["status"] == "pending"
    assert body["booking"]["meeting"]["type"] == "hotel"

    assert _slot_status(db, slot.id) == "pending"


def test_create_reservation_without_slot(client, db, traveler, make_guide):
    guide = make_guide(prices={"h4": 100, "h6": 140, "h8": 180, "currency": "EUR"})

    response = client.post("/api/reservations", json=_payload(traveler, guide, durations=(8, 8)))
    assert response.status_code == 200
    body = response.json()
    assert body["slot_reserved"] is False
    assert body["reservation"]["currency"] == "EUR"
    assert body["reservation"]["subtotal"] == 360
    assert body["reservation"]["total"] == 396


def test_slot_cannot_be_claimed_twice(client, db, traveler, make_user, guide, make_slot):
    slot = make_slot(guide)
    other = make_user(role="traveler")

    assert client.post("/api/reservations", json=_payload(traveler, guide, slot)).status_code == 200
    response = client.post("/api/reservations", json=_payload(other, guide, slot))
    assert response.status_code == 400
    assert response.json() == {"error": "Slot is no longer available"}
    assert db.query(Reservation).count() == 1


def test_lost_race_leaves_nothing_behind(client, db, traveler, guide, make_slot, monkeypatch):
    slot = make_slot(guide)
    monkeypatch.setattr(reservations_routes, "claim_slot", lambda db, slot_id: False)

    response = client.post("/api/reservations", json=_payload(traveler, guide, slot))
    assert response.status_code == 400
    assert db.query(Reservation).count() == 0


def test_failed_insert_rolls_back_slot_claim(client, db, traveler, guide, make_slot, monkeypatch):
    slot = make_slot(guide)

    def broken_booking(**kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(reservations_routes, "Booking", broken_booking)

    response = client.post("/api/reservations", json=_payload(traveler, guide, slot))
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create reservation"}
    assert db.query(Reservation).count() == 0
    assert _slot_status(db, slot.id) == "open"


@pytest.mark.parametrize("slot_status", ["pending", "booked", "closed"])
def test_unavailable_slot_is_rejected(client, traveler, guide, make_slot, slot_status):
    slot = make_slot(guide, status=slot_status)
    response = client.post("/api/reservations", json=_payload(traveler, guide, slot))
    assert response.status_code == 400
    assert response.json()["error"] == "Slot is no longer available"


def test_slot_of_another_guide_is_rejected(client, traveler, guide, make_guide, make_slot):
    other_guide = make_guide(base_rate_hour=20)
    slot = make_slot(other_guide)
    response = client.post("/api/reservations", json=_payload(traveler, guide, slot))
    assert response.status_code == 400
    assert response.json()["error"] == "Slot does not belong to this guide"


def test_unknown_guide_or_slot(client, db, traveler, guide, make_slot):
    response = client.post("/api/reservations", json=_payload(traveler, traveler))
    assert response.status_code == 404
    assert response.json()["error"] == "Guide not found"

    slot = make_slot(guide)
    payload = _payload(traveler, guide, slot)
    db.delete(slot)
    db.commit()
    response = client.post("/api/reservations", json=payload)
    assert response.status_code == 404
    assert response.json()["error"] == "Slot not found"


def test_missing_tier_price_is_a_bad_request(client, traveler, make_guide):
    guide = make_guide(prices={"h4": 100, "currency": "USD"})
    response = client.post("/api/reservations", json=_payload(traveler, guide, durations=(6,)))
    assert response.status_code == 400


def test_sessions_are_required(client, traveler, guide):
    payload = _payload(traveler, guide)
    payload["sessions"] = []
    response = client.post("/api/reservations", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"


def test_accept_books_slot_and_opens_conversation(client, db, traveler, guide, make_slot):
    slot = make_slot(guide)
    reservation_id = client.post("/api/reservations", json=_payload(traveler, guide, slot)).json()["reservation"]["id"]

    response = client.patch(f"/api/reservations/{reservation_id}", json={"status": "accepted"})
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    assert _slot_status(db, slot.id) == "booked"
    conversation = db.query(Conversation).one()
    assert set(conversation.participant_ids) == {str(traveler.id), str(guide.id)}
    assert db.query(Booking).one().status == "accepted"


def test_cancel_releases_slot(client, db, traveler, guide, make_slot):
    slot = make_slot(guide)
    reservation_id = client.post("/api/reservations", json=_payload(traveler, guide, slot)).json()["reservation"]["id"]
    client.patch(f"/api/reservations/{reservation_id}", json={"status": "accepted"})

    response = client.patch(f"/api/reservations/{reservation_id}", json={"status": "cancelled"})
    assert response.status_code == 200
    assert _slot_status(db, slot.id) == "open"
    assert db.query(Booking).one().status == "cancelled"


def test_invalid_reservation_transitions(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="pending")

    response = client.patch(f"/api/reservations/{reservation.id}", json={"status": "completed"})
    assert response.status_code == 400

    refunded = make_reservation(traveler, guide, status="refunded")
    assert client.patch(f"/api/reservations/{refunded.id}", json={"status": "pending"}).status_code == 400

    assert client.patch(f"/api/reservations/{reservation.id}", json={"status": "bogus"}).status_code == 400


def test_completed_reservation_can_be_refunded(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    response = client.patch(f"/api/reservations/{reservation.id}", json={"status": "refunded"})
    assert response.status_code == 200
    assert response.json()["status"] == "refunded"


def test_listings(client, traveler, guide, make_user, make_reservation):
    make_reservation(traveler, guide)
    make_reservation(make_user(role="traveler"), guide, status="accepted")

    assert len(client.get(f"/api/reservations/traveler/{traveler.id}").json()) == 1
    assert len(client.get(f"/api/reservations/guide/{guide.id}").json()) == 2
    assert len(client.get("/api/bookings").json()) == 2
    assert len(client.get("/api/bookings", params={"status": "accepted"}).json()) == 1


def test_quote_endpoint_matches_reservation_pricing(client, guide):
    response = client.get(f"/api/guides/{guide.id}/quote", params={"duration_hours": 6})
    assert response.status_code == 200
    body = response.json()
    assert body["subtotal"] == 200
    assert body["traveler_fee"] == 20
    assert body["total"] == 220
    assert body["platform_commission"] == 50
    assert body["description"] == "6 hours (5% discount)"


def test_held_slot_cannot_be_reopened_and_claimed_again(client, db, traveler, make_user, guide, make_slot):
    slot = make_slot(guide)
    first_id = client.post("/api/reservations", json=_payload(traveler, guide, slot)).json()["reservation"]["id"]
    client.patch(f"/api/reservations/{first_id}", json={"status": "accepted"})

    reopen = client.patch(f"/api/availability/{slot.id}", json={"status": "open"})
    assert reopen.status_code == 400
    assert _slot_status(db, slot.id) == "booked"

    second = client.post("/api/reservations", json=_payload(make_user(role="traveler"), guide, slot))
    assert second.status_code == 400
    assert db.query(Reservation).filter(Reservation.slot_id == slot.id).count() == 1


def test_pending_slot_cannot_be_closed_under_a_reservation(client, db, traveler, guide, make_slot):
    slot = make_slot(guide)
    client.post("/api/reservations", json=_payload(traveler, guide, slot))

    response = client.patch(f"/api/availability/{slot.id}", json={"status": "closed"})
    assert response.status_code == 400
    assert _slot_status(db, slot.id) == "pending"


@pytest.mark.parametrize("target", ["pending", "booked"])
def test_reserved_states_cannot_be_set_directly(client, db, guide, make_slot, target):
    slot = make_slot(guide)
    response = client.patch(f"/api/availability/{slot.id}", json={"status": target})
    assert response.status_code == 400
    assert _slot_status(db, slot.id) == "open"


def test_slot_reopens_once_its_reservation_is_cancelled(client, db, traveler, make_user, guide, make_slot):
    slot = make_slot(guide)
    first_id = client.post("/api/reservations", json=_payload(traveler, guide, slot)).json()["reservation"]["id"]
    client.patch(f"/api/reservations/{first_id}", json={"status": "cancelled"})
    assert _slot_status(db, slot.id) == "open"

    assert client.patch(f"/api/availability/{slot.id}", json={"status": "closed"}).status_code == 200
    assert client.patch(f"/api/availability/{slot.id}", json={"status": "open"}).status_code == 200
    assert client.post("/api/reservations", json=_payload(make_user(role="traveler"), guide, slot)).status_code == 200


def test_accepting_onto_a_closed_slot_is_refused(client, db, traveler, guide, make_slot, make_reservation):
    slot = make_slot(guide, status="closed")
    reservation = make_reservation(traveler, guide, status="pending", slot=slot)

    response = client.patch(f"/api/reservations/{reservation.id}", json={"status": "accepted"})
    assert response.status_code == 400
    assert response.json() == {"error": "Slot is no longer available"}
    db.expire_all()
    assert db.get(Reservation, reservation.id).status == "pending"
    assert _slot_status(db, slot.id) == "closed"
