"""HTTP API tests against the app factory with in-memory services."""

from datetime import timedelta

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.constants import WORKOUTS_COLLECTION
from app.main import create_application
from app.services.catalog import ExerciseCatalogClient
from app.services.serialization import session_to_document
from app.services.store import InMemoryWorkoutStore

from tests.conftest import T0, USER_ID, FakeClock, make_session

HEADERS = {"X-User-Id": USER_ID}
BENCH = {"id": "1", "title": "Bench Press", "category": "Chest", "image_name": "dumbbell.fill"}


def _catalog_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/exercises/bodyPartList":
        return httpx.Response(200, json=["back", "chest"])
    if request.url.path.startswith("/exercises/bodyPart/"):
        return httpx.Response(
            200,
            json=[{"id": "0025", "name": "barbell bench press", "bodyPart": "chest", "equipment": "barbell", "target": "pectorals"}],
        )
    return httpx.Response(503)


@pytest.fixture
def store():
    return InMemoryWorkoutStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(store, clock):
    catalog = ExerciseCatalogClient(
        "https://catalog.test",
        api_key="k",
        host="catalog.test",
        client=httpx.AsyncClient(transport=httpx.MockTransport(_catalog_handler)),
    )
    app = create_application(
        settings=Settings(store_backend="memory", tick_interval_seconds=3600),
        store=store,
        catalog=catalog,
        clock=clock,
    )
    with TestClient(app) as c:
        yield c


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/api/v1/health").json()["status"] == "ok"
    ready = client.get("/api/v1/health/ready").json()
    assert ready == {"status": "ok", "store": "InMemoryWorkoutStore"}


def test_user_header_is_required(client):
    response = client.get("/api/v1/session")

    assert response.status_code == 401


class TestSessionEndpoints:
    def test_full_workout(self, client, clock, store):
        state = client.get("/api/v1/session", headers=HEADERS).json()
        assert state["state"] == "not_started"

        assert client.post("/api/v1/session/start", headers=HEADERS).json()["state"] == "active"
        response = client.post("/api/v1/session/exercises", json=BENCH, headers=HEADERS)
        assert response.status_code == 201
        response = client.post(
            "/api/v1/session/exercises/0/sets",
            json={"reps": 10, "weight": 100, "target_rep_range": {"min": 8, "max": 12}},
            headers=HEADERS,
        )
        assert response.status_code == 201
        assert response.json()["reps"] == 10

        clock.advance(65)
        finished = client.post("/api/v1/session/finish", headers=HEADERS).json()

        assert finished["state"] == "finished"
        assert finished["elapsed_display"] == "01:05"
        assert finished["session"]["total_duration"] == 65
        assert finished["total_weight"] == 100
        history = client.get("/api/v1/workouts", headers=HEADERS).json()
        assert [w["id"] for w in history] == [finished["session"]["id"]]

    def test_invalid_transition_is_conflict(self, client):
        response = client.post("/api/v1/session/finish", headers=HEADERS)

        assert response.status_code == 409
        assert "not_started" in response.json()["detail"]

    def test_pause_resume_and_reset(self, client):
        client.post("/api/v1/session/start", headers=HEADERS)

        assert client.post("/api/v1/session/pause", headers=HEADERS).json()["state"] == "paused"
        assert client.post("/api/v1/session/pause", headers=HEADERS).status_code == 409
        assert client.post("/api/v1/session/resume", headers=HEADERS).json()["state"] == "active"
        assert client.post("/api/v1/session/reset", headers=HEADERS).json()["state"] == "not_started"

    def test_sessions_are_per_user(self, client):
        client.post("/api/v1/session/start", headers=HEADERS)

        other = client.get("/api/v1/session", headers={"X-User-Id": "someone-else"}).json()

        assert other["state"] == "not_started"

    def test_bad_indices_are_not_found(self, client):
        client.post("/api/v1/session/exercises", json=BENCH, headers=HEADERS)

        assert client.delete("/api/v1/session/exercises/3", headers=HEADERS).status_code == 404
        assert client.post("/api/v1/session/exercises/3/sets", json={"reps": 5}, headers=HEADERS).status_code == 404
        assert client.delete("/api/v1/session/exercises/0/sets/0", headers=HEADERS).status_code == 404
        assert client.delete("/api/v1/session/exercises/0", headers=HEADERS).status_code == 204

    def test_non_positive_reps_rejected(self, client):
        client.post("/api/v1/session/exercises", json=BENCH, headers=HEADERS)

        response = client.post("/api/v1/session/exercises/0/sets", json={"reps": 0}, headers=HEADERS)

        assert response.status_code == 422

    def test_inverted_rep_range_rejected(self, client):
        client.post("/api/v1/session/exercises", json=BENCH, headers=HEADERS)

        response = client.post(
            "/api/v1/session/exercises/0/sets",
            json={"reps": 5, "target_rep_range": {"min": 12, "max": 8}},
            headers=HEADERS,
        )

        assert response.status_code == 422


class TestTemplateEndpoints:
    def test_defaults_are_seeded_on_first_use(self, client):
        templates = client.get("/api/v1/templates", headers=HEADERS).json()
        favorites = client.get("/api/v1/templates/favorites", headers=HEADERS).json()

        assert sorted(t["name"] for t in templates) == ["Pull Day", "Push Day"]
        assert [t["name"] for t in favorites] == ["Push Day"]

    def test_create_toggle_instantiate_delete(self, client):
        payload = {
            "name": "Leg Day",
            "exercises": [
                {
                    "exercise_id": "2",
                    "name": "Squats",
                    "category": "Legs",
                    "image_name": "figure.walk",
                    "target_sets": 3,
                    "target_rep_range": {"min": 8, "max": 12},
                }
            ],
        }
        created = client.post("/api/v1/templates", json=payload, headers=HEADERS)
        assert created.status_code == 201
        template_id = created.json()["id"]

        toggled = client.post(f"/api/v1/templates/{template_id}/favorite", headers=HEADERS).json()
        assert toggled["is_favorite"] is True

        started = client.post(f"/api/v1/templates/{template_id}/instantiate", headers=HEADERS)
        assert started.status_code == 201
        assert [e["name"] for e in started.json()["exercises"]] == ["Squats"]
        again = client.post(f"/api/v1/templates/{template_id}/instantiate", headers=HEADERS)
        assert again.status_code == 409

        assert client.delete(f"/api/v1/templates/{template_id}", headers=HEADERS).status_code == 204
        assert client.get(f"/api/v1/templates/{template_id}", headers=HEADERS).status_code == 404

    def test_replace_keeps_id(self, client):
        template_id = client.get("/api/v1/templates", headers=HEADERS).json()[0]["id"]

        replaced = client.put(
            f"/api/v1/templates/{template_id}",
            json={"name": "Renamed", "exercises": []},
            headers=HEADERS,
        ).json()

        assert replaced["id"] == template_id
        assert replaced["name"] == "Renamed"

    def test_unknown_template_is_not_found(self, client):
        assert client.post("/api/v1/templates/nope/favorite", headers=HEADERS).status_code == 404


class TestHistoryAndStats:
    def test_stats_and_streak(self, client, store):
        for n in range(3):
            session = make_session(T0 - timedelta(days=n), sets=[(10, 100.0), (5, 50.0)])
            store.put_document(USER_ID, WORKOUTS_COLLECTION, session_to_document(session))

        stats = client.get("/api/v1/stats", headers=HEADERS).json()
        streak = client.get("/api/v1/streak", headers=HEADERS).json()

        assert stats["totals"]["total_workouts"] == 3
        assert stats["totals"]["total_weight"] == 450
        assert stats["workout_streak"] == 2
        assert streak == {"current_streak": 2, "longest_streak": 3, "last_workout_date": "2026-03-04"}

    def test_delete_workout(self, client, store):
        session = make_session(T0)
        store.put_document(USER_ID, WORKOUTS_COLLECTION, session_to_document(session))

        assert client.get(f"/api/v1/workouts/{session.id}", headers=HEADERS).status_code == 200
        assert client.delete(f"/api/v1/workouts/{session.id}", headers=HEADERS).status_code == 204
        assert client.get(f"/api/v1/workouts/{session.id}", headers=HEADERS).status_code == 404

    def test_get_old_workout(self, client, store):
        sessions = [make_session(T0 - timedelta(days=n)) for n in range(60)]
        for session in sessions:
            store.put_document(USER_ID, WORKOUTS_COLLECTION, session_to_document(session))

        response = client.get(f"/api/v1/workouts/{sessions[-1].id}", headers=HEADERS)

        assert response.status_code == 200
        assert response.json()["id"] == sessions[-1].id


class TestExerciseEndpoints:
    def test_body_parts(self, client):
        body = client.get("/api/v1/exercises/body-parts").json()

        assert body == {"body_parts": ["back", "chest"], "error_message": None}

    def test_exercises_by_body_part(self, client):
        body = client.get("/api/v1/exercises/body-parts/chest").json()

        assert body["exercises"][0]["title"] == "barbell bench press"
        assert body["exercises"][0]["category"] == "Chest"

    def test_catalog_failure_is_reported_in_body(self, client):
        body = client.get("/api/v1/exercises", params={"query": "curl"}).json()

        assert body["exercises"] == []
        assert body["error_message"].startswith("Failed to search exercises")

    def test_defaults_and_equipment(self, client):
        assert len(client.get("/api/v1/exercises/defaults").json()) == 5
        assert "dumbbell" in client.get("/api/v1/exercises/equipment").json()
