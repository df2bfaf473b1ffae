import pytest

from blockthetweet.errors import StartupFailure
from blockthetweet.inference.adapter import InferenceAdapter

torch = pytest.importorskip("torch")

from blockthetweet.models.torchscript_model import TorchScriptScorer  # noqa: E402


class MeanEmbeddingClassifier(torch.nn.Module):
    def __init__(self):
        super().__init__()
        self.embedding = torch.nn.Embedding(10, 4, padding_idx=0)
        self.linear = torch.nn.Linear(4, 1)

    def forward(self, x):
        return torch.sigmoid(self.linear(self.embedding(x).mean(dim=1)))


@pytest.fixture
def model_path(tmp_path):
    torch.manual_seed(0)
    path = tmp_path / "model.pt"
    torch.jit.script(MeanEmbeddingClassifier()).save(str(path))
    return str(path)


def test_scores_sequence(model_path):
    adapter = InferenceAdapter(TorchScriptScorer(model_path))
    result = adapter.infer((1, 2, 3) + (0,) * 31)
    assert result.ok
    assert 0.0 <= result.confidence <= 1.0
    assert result.latency_ns >= 0
    assert adapter.infer((1, 2, 3) + (0,) * 31).confidence == result.confidence


def test_out_of_range_id_is_inference_failure(model_path):
    result = InferenceAdapter(TorchScriptScorer(model_path)).infer((99,) * 34)
    assert not result.ok


def test_missing_model_is_startup_failure(tmp_path):
    with pytest.raises(StartupFailure):
        TorchScriptScorer(str(tmp_path / "missing.pt"))
