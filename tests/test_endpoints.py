"""
Integration tests for API endpoints using a SQLite DB.
"""
from datetime import datetime, timedelta, timezone

import pytest

METRICS = {
    "clutter_level": 5,
    "functionality_score": 5,
    "joy_factor": 5,
    "energy_flow": 5,
    "accessibility_score": 5,
}
TIDY = {
    "clutter_level": 1,
    "functionality_score": 10,
    "joy_factor": 10,
    "energy_flow": 10,
    "accessibility_score": 10,
}


def _today() -> str:
    return str(datetime.now(tz=timezone.utc).date())


@pytest.fixture()
def bedroom(client):
    r = client.put("/rooms/bedroom", json={"room_name": "Bedroom", "metrics": METRICS})
    assert r.status_code == 200
    return r.json()


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_openapi_documents_error_envelope(self, client):
        schemas = client.get("/openapi.json").json()["components"]["schemas"]
        assert set(schemas["ErrorResponse"]["properties"]) == {"code", "message", "details"}


class TestRooms:
    def test_put_room(self, bedroom):
        assert bedroom["room_id"] == "bedroom"
        assert bedroom["composite_score"] == 5
        assert bedroom["is_completed"] is False
        assert bedroom["completion_rate"] == 0.0

    def test_put_room_replaces_metrics(self, client, bedroom):
        r = client.put("/rooms/bedroom", json={"room_name": "Bedroom", "metrics": TIDY})
        assert r.json()["composite_score"] == 10
        assert r.json()["is_completed"] is True

    def test_get_room(self, client, bedroom):
        r = client.get("/rooms/bedroom")
        assert r.status_code == 200
        assert r.json()["metrics"] == METRICS

    def test_add_category(self, client, bedroom):
        r = client.post(
            "/rooms/bedroom/categories",
            json={"name": "books", "item_count": 40, "keep_decision": "keep"},
        )
        assert r.status_code == 200
        assert r.json()["total_categories"] == 1
        assert r.json()["completion_rate"] == 1.0

    def test_put_does_not_award_points(self, client, bedroom):
        assert client.get("/motivation").json()["level"]["total_points"] == 0

    def test_remove_category(self, client, bedroom):
        client.post("/rooms/bedroom/categories", json={"name": "books"})
        client.post("/rooms/bedroom/categories", json={"name": "shoes"})
        r = client.delete("/rooms/bedroom/categories/books")
        assert r.status_code == 200
        assert r.json()["total_categories"] == 1

    def test_delete_room(self, client, bedroom):
        r = client.delete("/rooms/bedroom")
        assert r.status_code == 204
        assert client.get("/rooms/bedroom").status_code == 404
        assert client.get("/dashboard").json()["room_count"] == 0

    def test_delete_unknown_room(self, client):
        r = client.delete("/rooms/attic")
        assert r.status_code == 404
        assert r.json()["code"] == "ROOM_NOT_FOUND"


class TestProgress:
    def test_progress_awards_points_and_streak(self, client, bedroom):
        r = client.post("/rooms/bedroom/progress", json={"metrics": METRICS, "hours": 4})
        assert r.status_code == 200
        body = r.json()
        assert body["points_awarded"] == 12
        assert body["level"]["total_points"] == 12
        assert body["snapshot_day"] == _today()
        assert body["streaks"][0]["activity_type"] == "daily_organization"
        assert body["streaks"][0]["current_streak"] == 1

    def test_minimum_points(self, client, bedroom):
        r = client.post("/rooms/bedroom/progress", json={"metrics": METRICS, "hours": 0.5})
        assert r.json()["points_awarded"] == 5

    def test_progress_writes_history(self, client, bedroom):
        client.post("/rooms/bedroom/progress", json={"metrics": TIDY})
        entries = client.get("/history").json()["entries"]
        assert entries == [{"day": _today(), "scores": {"bedroom": 10}, "average_score": 10.0}]

    def test_completion_streak(self, client, bedroom):
        r = client.post("/rooms/bedroom/progress", json={"metrics": TIDY})
        types = [s["activity_type"] for s in r.json()["streaks"]]
        assert types == ["daily_organization", "room_completion"]

    def test_unknown_room(self, client):
        r = client.post("/rooms/garage/progress", json={"metrics": METRICS})
        assert r.status_code == 404

    def test_state_persists_between_requests(self, client, bedroom):
        client.post("/rooms/bedroom/progress", json={"metrics": METRICS, "hours": 10})
        client.post("/rooms/bedroom/progress", json={"metrics": METRICS, "hours": 10})
        body = client.get("/motivation").json()
        assert body["level"]["total_points"] == 60
        daily = next(s for s in body["streaks"] if s["activity_type"] == "daily_organization")
        assert daily["current_streak"] == 2


class TestDashboard:
    def test_empty_dashboard(self, client):
        r = client.get("/dashboard")
        assert r.status_code == 200
        body = r.json()
        assert body["overall_score"] == 0
        assert body["room_count"] == 0
        assert body["today_average"] is None
        assert body["effort"] == {
            "total_items_processed": 0,
            "total_hours_spent": 0.0,
            "average_decision_speed": 0.0,
        }
        assert body["active_challenges"] == []

    def test_dashboard_aggregates(self, client, bedroom):
        client.put("/rooms/kitchen", json={"room_name": "Kitchen", "metrics": TIDY})
        client.post("/rooms/bedroom/progress", json={"metrics": METRICS})
        body = client.get("/dashboard", params={"day": _today()}).json()
        assert body["room_count"] == 2
        assert body["completed_rooms"] == 1
        assert body["overall_score"] == 8
        assert body["today_average"] == 7.5
        assert body["current_daily_streak"] == 1

    def test_dashboard_effort(self, client, bedroom):
        client.post("/rooms/bedroom/categories", json={"name": "books", "item_count": 20})
        client.post("/rooms/bedroom/progress", json={"metrics": METRICS, "hours": 4})
        client.post(
            "/rooms/bedroom/categories/books/decision",
            json={"payload": {"recommendation": "keep"}},
        )
        effort = client.get("/dashboard").json()["effort"]
        assert effort["total_hours_spent"] == 4.0
        assert effort["total_items_processed"] == 20
        assert effort["average_decision_speed"] == 5.0


class TestDecisions:
    def test_resolve_valid_payload(self, client):
        r = client.post("/decisions/resolve", json={"payload": {
            "overallScore": 88,
            "recommendation": "keep",
            "confidence": 91,
            "reasoning": ["Used daily"],
        }})
        assert r.status_code == 200
        body = r.json()
        assert body["overallScore"] == 88
        assert body["recommendation"] == "keep"
        assert body["reasoning"] == ["Used daily"]
        assert body["criteriaBreakdown"]["marieKondo"]["joyFactor"] == 50

    def test_resolve_fenced_string(self, client):
        r = client.post(
            "/decisions/resolve",
            json={"payload": "```json\n{\"recommendation\": \"discard\"}\n```"},
        )
        body = r.json()
        assert body["recommendation"] == "discard"
        assert body["reasoning"] == ["Analysis unavailable"]

    def test_resolve_missing_payload_is_fallback(self, client):
        body = client.post("/decisions/resolve", json={}).json()
        assert body["recommendation"] == "needs_review"
        assert body["confidence"] == 30
        assert body["overallScore"] == 50

    def test_resolve_hint(self, client):
        body = client.post("/decisions/resolve", json={
            "payload": None,
            "fallback_hint": {"easternPhilosophy": {"seasonalHarmony": 90}},
        }).json()
        assert body["criteriaBreakdown"]["easternPhilosophy"]["seasonalHarmony"] == 90

    def test_local_score(self, client):
        r = client.post("/decisions/score", json={"criteria": {}})
        assert r.status_code == 200
        body = r.json()
        assert body["overallScore"] == 50
        assert body["recommendation"] == "donate"

    def test_accept_recommendation(self, client, bedroom):
        client.post("/rooms/bedroom/categories", json={"name": "clothes"})
        r = client.post(
            "/rooms/bedroom/categories/clothes/decision",
            json={"payload": {"recommendation": "donate"}},
        )
        assert r.status_code == 200
        assert r.json()["streaks"][0]["activity_type"] == "decision_making"
        assert client.get("/rooms/bedroom").json()["decided_categories"] == 1


class TestMotivation:
    def test_initial_state(self, client):
        body = client.get("/motivation").json()
        assert body["level"] == {"current_level": 1, "total_points": 0, "points_to_next_level": 100}
        assert {s["activity_type"] for s in body["streaks"]} == {
            "daily_organization", "room_completion", "decision_making",
        }
        assert body["achievements"] == []
        assert body["challenges"] == []

    def test_award_250(self, client):
        r = client.post("/motivation/points", json={"amount": 250})
        body = r.json()
        assert body["leveled_up"] is True
        assert body["levels_gained"] == 2
        assert body["level"] == {"current_level": 3, "total_points": 0, "points_to_next_level": 225}

    def test_review(self, client):
        body = client.post("/motivation/review").json()
        assert body["points_awarded"] == 25

    def test_record_and_break_streak(self, client):
        client.post("/motivation/streaks/decision_making/record")
        client.post("/motivation/streaks/decision_making/record")
        r = client.post("/motivation/streaks/decision_making/break")
        body = r.json()
        assert body["streak_broken"] is True
        assert body["streaks"][0]["current_streak"] == 0
        assert body["streaks"][0]["longest_streak"] == 2

    def test_achievement_once(self, client):
        achievement = {
            "name": "Zen Master",
            "description": "A week of mindful reviews",
            "category": "feng_shui",
            "point_value": 75,
        }
        first = client.post("/motivation/achievements", json=achievement).json()
        second = client.post("/motivation/achievements", json=achievement).json()
        assert first["points_awarded"] == 75
        assert second["points_awarded"] == 0
        body = client.get("/motivation").json()
        assert len(body["achievements"]) == 1
        assert body["level"]["total_points"] == 75

    def test_challenge_lifecycle(self, client):
        today = datetime.now(tz=timezone.utc).date()
        challenge = {
            "challenge_id": "spring-clean",
            "name": "Spring Clean",
            "start_date": str(today - timedelta(days=1)),
            "end_date": str(today + timedelta(days=30)),
            "target_metric": "rooms_completed",
            "target_value": 4,
            "rewards": ["Fresh Start badge"],
        }
        r = client.post("/motivation/challenges", json=challenge)
        assert r.status_code == 201
        assert r.json()["current_progress"] == 0
        assert r.json()["is_met"] is False

        r = client.put("/motivation/challenges/spring-clean/progress", json={"progress": 2})
        assert r.json()["progress_ratio"] == 0.5
        assert client.get("/motivation").json()["challenges"][0]["current_progress"] == 2
        assert len(client.get("/dashboard").json()["active_challenges"]) == 1

        r = client.post("/motivation/challenges/spring-clean/complete")
        assert r.status_code == 200
        assert r.json()["challenge_id"] == "spring-clean"
        assert client.get("/motivation").json()["challenges"] == []

    def test_duplicate_challenge_is_invalid_input(self, client):
        challenge = {
            "challenge_id": "winter",
            "name": "Winter",
            "start_date": "2026-12-21",
            "end_date": "2027-03-19",
            "target_metric": "items_processed",
            "target_value": 50,
        }
        client.post("/motivation/challenges", json=challenge)
        r = client.post("/motivation/challenges", json=challenge)
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_INPUT"

    def test_challenge_ending_before_start(self, client):
        r = client.post("/motivation/challenges", json={
            "challenge_id": "backwards",
            "name": "Backwards",
            "start_date": "2026-12-21",
            "end_date": "2026-12-01",
            "target_metric": "items_processed",
            "target_value": 5,
        })
        assert r.status_code == 422
        assert r.json()["details"]["field"] == "end_date"


class TestHistory:
    def test_snapshot_replaces_same_day(self, client):
        day = _today()
        client.post("/history/snapshots", json={"day": day, "scores": {"bedroom": 7}})
        r = client.post(
            "/history/snapshots",
            json={"day": day, "scores": {"bedroom": 9, "kitchen": 5}},
        )
        entries = r.json()["entries"]
        assert len(entries) == 1
        assert entries[0]["scores"] == {"bedroom": 9, "kitchen": 5}
        assert entries[0]["average_score"] == 7.0

    def test_snapshot_outside_window_is_dropped(self, client):
        old = str(datetime.now(tz=timezone.utc).date() - timedelta(days=91))
        r = client.post("/history/snapshots", json={"day": old, "scores": {"bedroom": 3}})
        assert r.json()["entries"] == []
        assert r.json()["retention_days"] == 90

    def test_snapshot_defaults_to_current_rooms(self, client, bedroom):
        r = client.post("/history/snapshots", json={})
        assert r.json()["entries"][0]["scores"] == {"bedroom": 5}

    def test_trend(self, client):
        today = datetime.now(tz=timezone.utc).date()
        client.post("/history/snapshots", json={"day": str(today), "scores": {"a": 8}})
        client.post(
            "/history/snapshots",
            json={"day": str(today - timedelta(days=1)), "scores": {"a": 4, "b": 5}},
        )
        points = client.get("/history/trend").json()["points"]
        assert points == [
            {"day": str(today - timedelta(days=1)), "average_score": 4.5},
            {"day": str(today), "average_score": 8.0},
        ]
