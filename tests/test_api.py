"""
HTTP-level tests: the real app factory with a fake-backed pipeline and a
throw-away SQLite file.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from config import Settings
from core.errors import InferenceConfigError
from core.meal_pipeline import MealAnalysisPipeline
from main import create_app
from tests.conftest import FakeProbe, FakeStorage, FakeVision

JPEG = ("meal.jpg", b"\xff\xd8\xff\xe0 fake jpeg", "image/jpeg")


def _client(tmp_path, vision=None, probe=None, storage=None) -> TestClient:
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    pipeline = MealAnalysisPipeline(
        storage or FakeStorage(), probe or FakeProbe(), vision or FakeVision()
    )
    return TestClient(create_app(settings, pipeline=pipeline))


@pytest.fixture
def client(tmp_path):
    with _client(tmp_path) as c:
        yield c


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


# ── analyze-meal ─────────────────────────────────────────────────────
def test_analyze_success_then_persist(client):
    r = client.post("/api/v1/analyze-meal", files={"image": JPEG}, data={"userId": "u1"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["meal"]["meal_type"] == "lunch"
    assert body["image_url"].startswith("https://cdn.test/u1/user_u1_meal_")

    # the caller stores the (edited) candidate explicitly
    saved = client.post(
        "/api/v1/meals",
        json={**body["meal"], "calories": 480, "user_id": "u1", "image_url": body["image_url"]},
    )
    assert saved.status_code == 201
    assert saved.json()["calories"] == 480

    logs = client.get("/api/v1/users/u1/ai-logs").json()
    assert len(logs) == 1
    assert logs[0]["image_url"] == body["image_url"]


def test_analyze_does_not_store_meals(client):
    client.post("/api/v1/analyze-meal", files={"image": JPEG}, data={"userId": "u1"})
    assert client.get("/api/v1/users/u1/meals").json() == []


def test_analyze_missing_image(client):
    r = client.post("/api/v1/analyze-meal", data={"userId": "u1"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "image is required"}


def test_analyze_missing_user(client):
    r = client.post("/api/v1/analyze-meal", files={"image": JPEG})
    assert r.status_code == 400
    assert r.json()["error"] == "user id is required"


def test_analyze_unreachable_image_is_500(tmp_path):
    with _client(tmp_path, probe=FakeProbe(reachable=False)) as c:
        r = c.post("/api/v1/analyze-meal", files={"image": JPEG}, data={"userId": "u1"})
    assert r.status_code == 500
    assert r.json()["success"] is False


def test_analyze_without_model_key_is_500(tmp_path):
    vision = FakeVision(error=InferenceConfigError("GEMINI_API_KEY not set in environment"))
    with _client(tmp_path, vision=vision) as c:
        r = c.post("/api/v1/analyze-meal", files={"image": JPEG}, data={"userId": "u1"})
    assert r.status_code == 500
    assert r.json()["details"] == "GEMINI_API_KEY not set in environment"


def test_analyze_invalid_model_output_is_400(tmp_path):
    vision = FakeVision(reply='{"name": "Soup", "calories": 120, "protein": 4, "carbs": 10, "fat": 5}')
    with _client(tmp_path, vision=vision) as c:
        r = c.post("/api/v1/analyze-meal", files={"image": JPEG}, data={"userId": "u1"})
    assert r.status_code == 400
    assert "meal_type" in r.json()["details"]


class _BrokenUrlStorage(FakeStorage):
    def public_url(self, key: str) -> str:
        raise RuntimeError("bucket listing exploded")


def test_analyze_unexpected_error_is_structured_500(tmp_path):
    with _client(tmp_path, storage=_BrokenUrlStorage()) as c:
        r = c.post("/api/v1/analyze-meal", files={"image": JPEG}, data={"userId": "u1"})
    assert r.status_code == 500
    assert r.json() == {
        "success": False,
        "error": "server error",
        "details": "bucket listing exploded",
    }


def test_shutdown_closes_http_clients(tmp_path):
    reachability = FakeProbe()
    with _client(tmp_path, probe=reachability) as c:
        c.get("/health")
        assert reachability.closed is False
    assert reachability.closed is True


# ── goals ────────────────────────────────────────────────────────────
BIOMETRICS = {"weight_kg": 70, "height_cm": 170, "age_years": 30, "sex": "male", "activity_level": "moderate"}


def test_goal_preview(client):
    r = client.post("/api/v1/goals/calculate", json=BIOMETRICS)
    assert r.status_code == 200
    assert r.json() == {"calories": 2507, "protein": 157, "carbs": 313, "fats": 70, "bmi": 24.2}


def test_goal_rejects_non_positive_weight(client):
    r = client.post("/api/v1/goals/calculate", json={**BIOMETRICS, "weight_kg": 0})
    assert r.status_code == 422
    assert "weight_kg" in r.json()["fields"]


def test_goal_store_and_read(client):
    assert client.get("/api/v1/users/u1/goals").status_code == 404
    r = client.put("/api/v1/users/u1/goals", json=BIOMETRICS)
    assert r.status_code == 200
    got = client.get("/api/v1/users/u1/goals").json()
    assert got["calories"] == 2507 and got["user_id"] == "u1"


# ── meals / summary / stats ──────────────────────────────────────────
MEAL = {"user_id": "u1", "name": "Oatmeal", "calories": 300, "protein": 10,
        "carbs": 50, "fat": 6, "meal_type": "breakfast"}


def test_meal_crud(client):
    meal_id = client.post("/api/v1/meals", json=MEAL).json()["id"]

    r = client.patch(f"/api/v1/meals/{meal_id}", json={"name": "Overnight oats"})
    assert r.json()["name"] == "Overnight oats"

    assert client.delete(f"/api/v1/meals/{meal_id}").status_code == 204
    assert client.get(f"/api/v1/meals/{meal_id}").status_code == 404


def test_meal_rejects_negative_values(client):
    r = client.post("/api/v1/meals", json={**MEAL, "fat": -2})
    assert r.status_code == 422


@pytest.mark.parametrize("field", ["name", "calories", "meal_type"])
def test_meal_patch_rejects_explicit_null(client, field):
    meal_id = client.post("/api/v1/meals", json=MEAL).json()["id"]
    r = client.patch(f"/api/v1/meals/{meal_id}", json={field: None})
    assert r.status_code == 422
    assert client.get(f"/api/v1/meals/{meal_id}").json()[field] == MEAL[field]


def test_meal_patch_may_clear_description(client):
    meal_id = client.post("/api/v1/meals", json={**MEAL, "description": "warm"}).json()["id"]
    r = client.patch(f"/api/v1/meals/{meal_id}", json={"description": None})
    assert r.status_code == 200
    assert r.json()["description"] is None


def test_summary_against_goal(client):
    client.put("/api/v1/users/u1/goals", json=BIOMETRICS)
    client.post("/api/v1/meals", json=MEAL)
    client.post("/api/v1/meals", json={**MEAL, "name": "Salad", "meal_type": "lunch", "calories": 200})

    s = client.get("/api/v1/users/u1/summary").json()
    assert len(s["meals"]) == 2
    assert s["totals"]["calories"] == 500
    assert s["progress"]["calories"]["remaining"] == 2507 - 500


def test_summary_without_goal(client):
    s = client.get("/api/v1/users/nobody/summary").json()
    assert s["goal"] is None and s["progress"] is None
    assert s["totals"]["calories"] == 0


def test_stats_and_history(client):
    client.post("/api/v1/meals", json=MEAL)
    client.post("/api/v1/meals", json={**MEAL, "meal_type": "snack", "name": "Apple", "calories": 95})

    stats = client.get("/api/v1/users/u1/stats", params={"period": "week"}).json()
    assert len(stats) == 1
    assert stats[0]["meals"] == 2 and stats[0]["calories"] == 395

    today = stats[0]["date"]
    snacks = client.get(
        "/api/v1/users/u1/meals/history", params={"start": today, "meal_type": "snack"}
    ).json()
    assert [m["name"] for m in snacks] == ["Apple"]


def test_weight_entries(client):
    r = client.post("/api/v1/users/u1/weight", json={"weight": 70.5, "date": "2026-03-01"})
    assert r.status_code == 201
    assert client.get("/api/v1/users/u1/weight").json()[0]["weight"] == 70.5
