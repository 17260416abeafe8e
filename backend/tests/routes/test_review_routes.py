from datetime import timedelta

from app.core.timezone_utils import utc_now
from app.models.booking import BookingStatus
from app.models.review_invite import ReviewInvite, ReviewInviteStatus
from tests.factories import auth_headers_for, make_booking


def _issue(client, coach_headers, email="brass@example.com"):
    response = client.post(
        "/api/v1/reviews/invites",
        json={"ensemble_email": email, "ensemble_name": "Riverside Brass"},
        headers=coach_headers,
    )
    assert response.status_code == 201
    return response.json()


class TestInviteRoutes:
    def test_issue_view_accept(self, client, coach, coach_headers, ensemble_headers):
        issued = _issue(client, coach_headers)
        token = issued["token"]
        assert issued["status"] == "pending"

        viewed = client.get(f"/api/v1/reviews/invites/{token}", headers=ensemble_headers)
        assert viewed.status_code == 200
        assert viewed.json()["coach"]["full_name"] == "Maria Lopez"
        assert "token" not in viewed.json()

        pending = client.get("/api/v1/reviews/invites/pending", headers=ensemble_headers).json()
        assert [i["id"] for i in pending["invites"]] == [issued["id"]]

        accepted = client.post(
            f"/api/v1/reviews/invites/{token}/accept",
            json={"rating": 5, "review_text": "Superb", "session_format": "virtual"},
            headers=ensemble_headers,
        )
        assert accepted.status_code == 201
        assert accepted.json()["rating"] == 5

        again = client.get(f"/api/v1/reviews/invites/{token}", headers=ensemble_headers)
        assert again.status_code == 409

        rating = client.get(f"/api/v1/reviews/coach/{coach.id}/rating").json()
        assert rating == {"coach_profile_id": coach.id, "rating": 5.0, "total_reviews": 1}

        sent = client.get("/api/v1/reviews/invites", headers=coach_headers).json()
        assert sent["invites"][0]["status"] == "accepted"

    def test_wrong_account_is_403(self, client, coach_headers):
        issued = _issue(client, coach_headers, email="someone-else@example.com")
        response = client.get(
            f"/api/v1/reviews/invites/{issued['token']}", headers=auth_headers_for("u", "brass@example.com")
        )
        assert response.status_code == 403

    def test_unknown_token_is_404(self, client, ensemble_headers):
        assert client.get("/api/v1/reviews/invites/nope", headers=ensemble_headers).status_code == 404

    def test_expired_invite_is_410_and_written_back(self, client, db, coach_headers, ensemble_headers):
        issued = _issue(client, coach_headers)
        invite = db.query(ReviewInvite).filter_by(id=issued["id"]).one()
        invite.expires_at = utc_now() - timedelta(minutes=1)
        db.commit()

        response = client.get(f"/api/v1/reviews/invites/{issued['token']}", headers=ensemble_headers)

        assert response.status_code == 410
        assert response.json()["code"] == "EXPIRED"
        db.expire_all()
        assert db.query(ReviewInvite).filter_by(id=issued["id"]).one().status == ReviewInviteStatus.EXPIRED

    def test_decline(self, client, coach_headers, ensemble_headers):
        issued = _issue(client, coach_headers)
        response = client.post(f"/api/v1/reviews/invites/{issued['token']}/decline", headers=ensemble_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "declined"

    def test_decline_by_other_account_is_403(self, client, db, coach_headers):
        issued = _issue(client, coach_headers)
        response = client.post(
            f"/api/v1/reviews/invites/{issued['token']}/decline",
            headers=auth_headers_for("u", "someone@example.com"),
        )

        assert response.status_code == 403
        assert db.query(ReviewInvite).filter_by(id=issued["id"]).one().status == ReviewInviteStatus.PENDING

    def test_malformed_email_is_rejected(self, client, coach_headers):
        response = client.post(
            "/api/v1/reviews/invites", json={"ensemble_email": "a@b.c,d@e.f"}, headers=coach_headers
        )
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_out_of_range_rating_is_400(self, client, coach_headers, ensemble_headers):
        issued = _issue(client, coach_headers)
        response = client.post(
            f"/api/v1/reviews/invites/{issued['token']}/accept",
            json={"rating": 7},
            headers=ensemble_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RATING"

    def test_duplicate_invite_is_409(self, client, coach_headers):
        _issue(client, coach_headers)
        response = client.post(
            "/api/v1/reviews/invites", json={"ensemble_email": "BRASS@example.com"}, headers=coach_headers
        )
        assert response.status_code == 409


class TestDirectReviews:
    def test_submit_list_and_status(self, client, db, coach, ensemble, ensemble_headers):
        make_booking(db, coach, ensemble, status=BookingStatus.COMPLETED)

        status = client.get(f"/api/v1/reviews/status?coach_id={coach.id}", headers=ensemble_headers).json()
        assert status == {"status": "ok", "ensembles": {ensemble.id: {"status": "eligible", "cooldown_until": None}}}

        created = client.post(
            "/api/v1/reviews",
            json={"coach_profile_id": coach.id, "rating": 4, "review_text": "Very helpful"},
            headers=ensemble_headers,
        )
        assert created.status_code == 201

        listed = client.get(f"/api/v1/reviews/coach/{coach.id}").json()
        assert listed["reviews"][0]["reviewer"]["ensemble_name"] == "Riverside Brass Quintet"

        again = client.post(
            "/api/v1/reviews", json={"coach_profile_id": coach.id, "rating": 5}, headers=ensemble_headers
        )
        assert again.status_code == 409
        assert again.json()["errors"]["reason"] == "cooldown"

    def test_unknown_coach_reviews_404(self, client):
        assert client.get("/api/v1/reviews/coach/missing").status_code == 404
        assert client.get("/api/v1/reviews/coach/missing/rating").status_code == 404


class TestSessionReviews:
    def test_coach_submits_feedback(self, client, db, coach, ensemble, coach_headers, ensemble_headers):
        booking = make_booking(db, coach, ensemble, status=BookingStatus.ACCEPTED)
        client.put(f"/api/v1/bookings/{booking.id}/complete", headers=coach_headers)

        pending = client.get("/api/v1/session-reviews/pending", headers=coach_headers).json()["reviews"]
        assert len(pending) == 1
        assert pending[0]["ensemble"]["ensemble_name"] == "Riverside Brass Quintet"

        submitted = client.post(
            f"/api/v1/session-reviews/{pending[0]['id']}/submit",
            json={"rating": 5, "feedback_text": "Prepared and focused"},
            headers=coach_headers,
        )
        assert submitted.status_code == 200
        assert submitted.json()["status"] == "completed"

        resubmit = client.post(
            f"/api/v1/session-reviews/{pending[0]['id']}/submit", json={"rating": 3}, headers=coach_headers
        )
        assert resubmit.status_code == 409

        public = client.get(f"/api/v1/session-reviews/ensemble/{ensemble.id}", headers=ensemble_headers).json()
        assert [r["rating"] for r in public["reviews"]] == [5]

    def test_pending_requires_coach(self, client, ensemble_headers):
        assert client.get("/api/v1/session-reviews/pending", headers=ensemble_headers).status_code == 403
