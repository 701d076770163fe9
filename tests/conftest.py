import io
from typing import List

import pytest
import torch
from fastapi.testclient import TestClient
from PIL import Image

from backend.config import Settings
from backend.deps import get_model
from backend.main import create_app
from ml_models.labels import CLASS_LABELS
from ml_models.predictor import ModelHandle


class FixedLogits(torch.nn.Module):
    """Returns the same logits for every input and counts calls."""

    def __init__(self, logits: List[float]):
        super().__init__()
        self.logits = torch.tensor([logits], dtype=torch.float32)
        self.calls = 0

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        self.calls += 1
        return self.logits.repeat(x.shape[0], 1)


def png_bytes(size=(64, 64), color="white") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings():
    return Settings(
        jwt_secret_key  = "test-secret",
        storage_backend = "memory",
        model_url       = "",
    )


@pytest.fixture
def fake_model():
    # winning class is the last label with softmax([0, 0, 2]) ≈ 78.7%
    logits = [0.0] * len(CLASS_LABELS)
    logits[-1] = 2.0
    return FixedLogits(logits)


@pytest.fixture
def model_handle(fake_model):
    return ModelHandle(model=fake_model, demo_mode=False, source="test")


@pytest.fixture
def app(settings, model_handle):
    application = create_app(settings)
    application.dependency_overrides[get_model] = lambda: model_handle
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(app, client):
    return app.state.store


def register(client, email="learner@practice.io", password="secret123", full_name="Li Hua"):
    return client.post("/register", json={
        "email":           email,
        "password":        password,
        "confirmPassword": password,
        "fullName":        full_name,
    })


def login(client, email="learner@practice.io", password="secret123"):
    return client.post("/login", json={"email": email, "password": password})


@pytest.fixture
def token(client):
    assert register(client).status_code == 201
    resp = login(client)
    assert resp.status_code == 200
    client.cookies.clear()
    return resp.json()["data"]["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
