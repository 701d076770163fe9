import pytest
import torch

from backend.errors import InputError
from backend.services.classification import classify
from ml_models.architecture import CharacterClassifier
from ml_models.image_encoder import ImageDecodeError, encode_image
from ml_models.labels import CLASS_LABELS, EXPLANATIONS, UNKNOWN_EXPLANATION, explain
from ml_models.predictor import ModelHandle, load_model, predict
from tests.conftest import FixedLogits, png_bytes


def test_encode_image_resizes_to_model_input():
    tensor = encode_image(png_bytes(size=(40, 90)))
    assert tensor.shape == (1, 3, 224, 224)
    assert tensor.dtype == torch.float32
    assert float(tensor.max()) <= 1.0


def test_encode_image_rejects_garbage():
    with pytest.raises(ImageDecodeError):
        encode_image(b"\x89PNG but not really")
    with pytest.raises(ImageDecodeError):
        encode_image(b"")


def test_classify_picks_highest_probability(model_handle):
    result = classify(model_handle, png_bytes())
    assert result.label == CLASS_LABELS[-1]
    assert result.explanation == EXPLANATIONS[result.label]
    assert result.confidence_score == pytest.approx(78.70, abs=0.01)


def test_classify_invalid_image_raises_input_error(model_handle):
    with pytest.raises(InputError, match="Invalid image"):
        classify(model_handle, b"nope")


def test_predict_rejects_wrong_output_width():
    handle = ModelHandle(model=FixedLogits([1.0, 2.0]), demo_mode=False, source="test")
    with pytest.raises(ValueError):
        predict(handle, torch.zeros(1, 3, 224, 224))


def test_every_label_has_an_explanation():
    for label in CLASS_LABELS:
        assert explain(label) != UNKNOWN_EXPLANATION
    assert explain("龍") == UNKNOWN_EXPLANATION


def test_demo_model_without_url():
    handle = load_model("")
    assert handle.demo_mode is True
    assert isinstance(handle.model, CharacterClassifier)

    label, confidence = predict(handle, encode_image(png_bytes()))
    assert label in CLASS_LABELS
    assert 0.0 <= confidence <= 100.0


class ConstantLogits(torch.nn.Module):
    def __init__(self):
        super().__init__()
        self.register_buffer("logits", torch.tensor([[3.0, 0.0, 0.0]]))

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.logits.repeat(x.shape[0], 1)


def test_load_torchscript_from_local_path(tmp_path):
    scripted = torch.jit.script(ConstantLogits())
    path = tmp_path / "model.pt"
    scripted.save(str(path))

    handle = load_model(str(path))
    assert handle.demo_mode is False
    label, _ = predict(handle, torch.zeros(1, 3, 224, 224))
    assert label == CLASS_LABELS[0]
