from backend.services.storage import PREDICTIONS
from tests.conftest import login, register


def attempt(client, headers, score, category="basic-strokes", character="七", **extra):
    body = {"category": category, "character": character, "confidenceScore": score, **extra}
    return client.post("/v2/predict", json=body, headers=headers)


def test_first_attempt_creates_record(client, auth_headers):
    resp = attempt(client, auth_headers, 72.5)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["category"] == "basic-strokes"
    assert data["character"] == "七"
    assert data["confidenceScore"] == 72.5
    assert data["result"] == "七"


def test_lower_score_leaves_record_unchanged(client, store, auth_headers):
    attempt(client, auth_headers, 80)
    resp = attempt(client, auth_headers, 60)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert "unchanged" in body["message"]
    assert body["data"]["storedScore"] == 80
    assert body["data"]["submittedScore"] == 60
    assert body["data"]["record"]["confidenceScore"] == 80

    [stored] = store.query(PREDICTIONS, {"character": "七"})
    assert stored["confidenceScore"] == 80


def test_equal_score_is_kept(client, auth_headers):
    attempt(client, auth_headers, 80)
    resp = attempt(client, auth_headers, 80)
    assert resp.status_code == 200
    assert "unchanged" in resp.json()["message"]


def test_higher_score_updates_in_place(client, store, auth_headers):
    created = attempt(client, auth_headers, 55).json()["data"]
    resp = attempt(client, auth_headers, 91, suggestion="Nice hook")

    assert resp.status_code == 200
    assert "updated" in resp.json()["message"]
    data = resp.json()["data"]
    assert data["id"] == created["id"]
    assert data["confidenceScore"] == 91
    assert data["suggestion"] == "Nice hook"
    assert data["createdAt"] == created["createdAt"]

    records = store.query(PREDICTIONS, {"character": "七"})
    assert len(records) == 1
    assert records[0]["confidenceScore"] == 91


def test_records_are_per_user(client, auth_headers):
    attempt(client, auth_headers, 90)
    register(client, email="other@practice.io")
    other_token = login(client, email="other@practice.io").json()["data"]["token"]
    client.cookies.clear()

    resp = attempt(client, {"Authorization": f"Bearer {other_token}"}, 10)
    assert resp.status_code == 201


def test_unknown_category_is_400(client, auth_headers):
    resp = attempt(client, auth_headers, 50, category="calligraphy")
    assert resp.status_code == 400
    assert "Unknown category" in resp.json()["message"]


def test_character_outside_category_is_400(client, auth_headers):
    resp = attempt(client, auth_headers, 50, category="nature", character="七")
    assert resp.status_code == 400


def test_score_out_of_range_is_400(client, auth_headers):
    resp = attempt(client, auth_headers, 150)
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("confidenceScore")


def test_scored_predict_requires_auth(client):
    resp = client.post("/v2/predict", json={
        "category": "basic-strokes", "character": "七", "confidenceScore": 50,
    })
    assert resp.status_code == 401
    assert resp.json()["message"] == "Missing token"
