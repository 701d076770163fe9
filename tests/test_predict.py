import pytest
from starlette.datastructures import UploadFile

from backend.api.predict import MAX_IMAGE_BYTES, PREDICTION_FAILED
from backend.services.storage import PREDICTIONS
from ml_models.labels import CLASS_LABELS, EXPLANATIONS
from tests.conftest import png_bytes


def upload(client, content, path="/predict", headers=None):
    return client.post(
        path,
        files={"image": ("char.png", content, "image/png")},
        headers=headers or {},
    )


def test_predict_image_stores_result(client, store):
    resp = upload(client, png_bytes())
    assert resp.status_code == 201

    body = resp.json()
    assert body["status"] == "success"
    assert body["message"] == "Model is predicted successfully"
    data = body["data"]
    assert data["result"] == CLASS_LABELS[-1]
    assert data["suggestion"] == EXPLANATIONS[CLASS_LABELS[-1]]
    assert data["confidenceScore"] == pytest.approx(78.70, abs=0.01)
    assert data["createdAt"].endswith("Z")
    assert "userId" not in data

    stored = store.get(PREDICTIONS, data["id"])
    assert stored["result"] == data["result"]


def test_v1_alias_behaves_like_predict(client):
    resp = upload(client, png_bytes(), path="/v1/predict")
    assert resp.status_code == 201


def test_predict_image_records_user_when_authenticated(client, store, auth_headers):
    resp = upload(client, png_bytes(), headers=auth_headers)
    assert resp.status_code == 201
    assert resp.json()["data"]["userId"]


def test_oversized_image_rejected_before_classification(client, fake_model, store):
    resp = upload(client, b"\x00" * (MAX_IMAGE_BYTES + 1))
    assert resp.status_code == 413
    assert resp.json()["status"] == "fail"
    assert fake_model.calls == 0
    assert store.query(PREDICTIONS) == []


def test_image_at_limit_is_not_rejected_as_too_large(client):
    resp = upload(client, b"\x00" * MAX_IMAGE_BYTES)
    assert resp.status_code == 400


def test_undecodable_image_is_400(client, fake_model):
    resp = upload(client, b"definitely not an image")
    assert resp.status_code == 400
    assert resp.json() == {"status": "fail", "message": PREDICTION_FAILED}
    assert fake_model.calls == 0


def test_storage_failure_is_400(client, store, monkeypatch):
    def broken_put(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(store, "put", broken_put)
    resp = upload(client, png_bytes())
    assert resp.status_code == 400
    assert resp.json()["message"] == PREDICTION_FAILED


def test_predict_with_invalid_token_is_401(client):
    resp = upload(client, png_bytes(), headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


def test_histories_lists_all_records_for_anonymous(client, auth_headers):
    upload(client, png_bytes())
    upload(client, png_bytes(), headers=auth_headers)

    resp = client.get("/predict/histories")
    assert resp.status_code == 200
    items = resp.json()["data"]
    assert len(items) == 2
    for item in items:
        assert item["id"] == item["history"]["id"]
        assert item["history"]["result"] == CLASS_LABELS[-1]
        assert item["history"]["createdAt"]


def test_histories_scoped_to_authenticated_user(client, auth_headers):
    upload(client, png_bytes())
    mine = upload(client, png_bytes(), headers=auth_headers).json()["data"]

    resp = client.get("/predict/histories", headers=auth_headers)
    items = resp.json()["data"]
    assert [i["id"] for i in items] == [mine["id"]]


def test_histories_store_failure_is_500(client, store, monkeypatch):
    def broken_query(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(store, "query", broken_query)
    resp = client.get("/predict/histories")
    assert resp.status_code == 500
    assert resp.json()["status"] == "fail"


@pytest.fixture
def read_sizes(monkeypatch):
    sizes = []
    original = UploadFile.read

    async def recording_read(self, size=-1):
        sizes.append(size)
        return await original(self, size)

    monkeypatch.setattr(UploadFile, "read", recording_read)
    return sizes


def test_upload_read_is_bounded(client, read_sizes):
    assert upload(client, png_bytes()).status_code == 201
    assert read_sizes == [MAX_IMAGE_BYTES + 1]


def test_oversized_upload_is_never_read_whole(client, read_sizes):
    resp = upload(client, b"\x00" * (MAX_IMAGE_BYTES * 3))
    assert resp.status_code == 413
    assert all(size == MAX_IMAGE_BYTES + 1 for size in read_sizes)
