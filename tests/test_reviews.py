from datetime import datetime, timedelta, timezone

from app.models.review_report import Review
from app.models.user import GuideProfile
from tests.conftest import auth_headers


def _review_payload(reservation, author, subject, rating=5, text="Wonderful afternoon"):
    return {
        "reservation_id": str(reservation.id),
        "author_user_id": str(author.id),
        "subject_user_id": str(subject.id),
        "rating": rating,
        "text": text,
    }


def _guide_rating(db, guide):
    db.expire_all()
    profile = db.get(GuideProfile, guide.id)
    return float(profile.rating_avg), profile.rating_count


def test_submit_review_updates_rating(client, db, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")

    response = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide, rating=4))
    assert response.status_code == 200
    assert response.json()["status"] == "published"
    assert _guide_rating(db, guide) == (4.0, 1)

    listed = client.get(f"/api/reviews/guide/{guide.id}").json()
    assert len(listed) == 1
    assert len(client.get(f"/api/reviews/author/{traveler.id}").json()) == 1


def test_guide_can_review_traveler(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="accepted")
    response = client.post("/api/reviews", json=_review_payload(reservation, guide, traveler))
    assert response.status_code == 200


def test_pending_reservation_cannot_be_reviewed(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="pending")
    response = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide))
    assert response.status_code == 400


def test_outsiders_cannot_review(client, traveler, guide, make_user, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    stranger = make_user(role="traveler")
    response = client.post("/api/reviews", json=_review_payload(reservation, stranger, guide))
    assert response.status_code == 400


def test_one_review_per_author_and_reservation(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    assert client.post("/api/reviews", json=_review_payload(reservation, traveler, guide)).status_code == 200

    response = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide))
    assert response.status_code == 409


def test_rating_bounds(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    response = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide, rating=6))
    assert response.status_code == 400


def test_author_edits_within_window(client, db, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    review_id = client.post(
        "/api/reviews", json=_review_payload(reservation, traveler, guide, rating=5, text="Great")
    ).json()["id"]

    response = client.patch(
        f"/api/reviews/{review_id}",
        json={"rating": 3, "text": "Good, ran late"},
        headers=auth_headers(traveler),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["text"] == "Good, ran late"
    assert body["original_text"] == "Great"
    assert body["edited_at"] is not None
    assert _guide_rating(db, guide) == (3.0, 1)


def test_author_cannot_edit_after_window(client, db, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    review_id = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide)).json()["id"]

    review = db.query(Review).one()
    review.created_at = datetime.now(timezone.utc) - timedelta(hours=25)
    db.commit()

    response = client.patch(
        f"/api/reviews/{review_id}", json={"text": "Changed my mind"}, headers=auth_headers(traveler)
    )
    assert response.status_code == 403


def test_only_author_edits_and_only_subject_responds(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    review_id = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide)).json()["id"]

    assert client.patch(
        f"/api/reviews/{review_id}", json={"text": "Edited by guide"}, headers=auth_headers(guide)
    ).status_code == 403
    assert client.patch(
        f"/api/reviews/{review_id}", json={"response_text": "Thanks!"}, headers=auth_headers(traveler)
    ).status_code == 403

    response = client.patch(
        f"/api/reviews/{review_id}", json={"response_text": "Thanks!"}, headers=auth_headers(guide)
    )
    assert response.status_code == 200
    assert response.json()["response_text"] == "Thanks!"
    assert response.json()["response_at"] is not None


def test_editing_requires_login(client, traveler, guide, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    review_id = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide)).json()["id"]
    assert client.patch(f"/api/reviews/{review_id}", json={"text": "x"}).status_code == 401


def test_hidden_reviews_leave_the_rating(client, db, traveler, guide, admin, make_reservation):
    reservation = make_reservation(traveler, guide, status="completed")
    review_id = client.post("/api/reviews", json=_review_payload(reservation, traveler, guide)).json()["id"]

    response = client.patch(
        f"/api/admin/reviews/{review_id}", json={"status": "hidden"}, headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert _guide_rating(db, guide) == (0.0, 0)
    assert client.get(f"/api/reviews/guide/{guide.id}").json() == []

    assert client.patch(
        f"/api/admin/reviews/{review_id}", json={"status": "published"}, headers=auth_headers(traveler)
    ).status_code == 403


def test_unknown_reservation(client, traveler, guide):
    payload = {
        "reservation_id": "00000000-0000-4000-8000-000000000000",
        "author_user_id": str(traveler.id),
        "subject_user_id": str(guide.id),
        "rating": 5,
        "text": "Lovely",
    }
    response = client.post("/api/reviews", json=payload)
    assert response.status_code == 404
    assert response.json() == {"error": "Reservation not found"}
