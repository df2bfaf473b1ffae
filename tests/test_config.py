from pathlib import Path

import pytest

from blockthetweet.config import ServiceConfig, load_config, config_from_dict, apply_overrides
from blockthetweet.errors import StartupFailure


ROOT = Path(__file__).resolve().parents[1]


def test_defaults():
    config = config_from_dict({})
    assert config.port == 3000
    assert config.stemmer_language == "english"
    assert config.sequence_length == 295
    assert config.app.to_dict() == {"author": "doddy-s", "version": "v0.1", "appName": "BlockTheTweet Inference"}


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "model:\n"
        "  backend: stub\n"
        "  thread_safe: false\n"
        "  stub:\n"
        "    bias: -1.0\n"
        "    weights: {5: 2.0}\n"
        "vocabulary:\n"
        "  path: words.json\n"
        "stemmer:\n"
        "  language: indonesian\n"
        "preprocessing:\n"
        "  sequence_length: 34\n"
        "server:\n"
        "  port: 8080\n"
    )
    config = load_config(str(path))
    assert config.model.backend == "stub"
    assert config.model.thread_safe is False
    assert config.model.stub_weights == {5: 2.0}
    assert config.vocabulary_path == "words.json"
    assert config.stemmer_language == "indonesian"
    assert config.sequence_length == 34
    assert config.port == 8080


def test_repository_config_serves_the_pretrained_model():
    config = load_config(str(ROOT / "config.yaml"))
    assert config.model.backend == "torchscript"
    assert config.model.stub_weights == {}


def test_stub_demo_config_loads():
    config = load_config(str(ROOT / "config.stub.yaml"))
    assert config.model.backend == "stub"
    assert config.model.stub_weights


def test_model_override_selects_torchscript_backend():
    config = load_config(str(ROOT / "config.stub.yaml"))
    config = apply_overrides(config, {"model": "./real.pt"})
    assert config.model.backend == "torchscript"
    assert config.model.path == "./real.pt"


def test_no_model_override_keeps_backend():
    config = load_config(str(ROOT / "config.stub.yaml"))
    assert apply_overrides(config, {"model": None, "port": 8081}).model.backend == "stub"


def test_missing_file():
    with pytest.raises(StartupFailure):
        load_config("/nonexistent/config.yaml")


@pytest.mark.parametrize("raw", [
    {"preprocessing": {"sequence_length": 0}},
    {"preprocessing": {"sequence_length": "34"}},
    {"server": {"port": 70000}},
    {"server": {"port": "abc"}},
    {"model": {"backend": "onnx"}},
])
def test_invalid_values(raw):
    with pytest.raises(StartupFailure):
        config_from_dict(raw)


def test_overrides():
    config = apply_overrides(ServiceConfig(), {
        "model": "other.pt",
        "vocabulary": "other.json",
        "language": "indonesian",
        "port": 9000,
        "sequence_length": 34,
        "host": None,
    })
    assert config.model.path == "other.pt"
    assert config.vocabulary_path == "other.json"
    assert config.stemmer_language == "indonesian"
    assert config.port == 9000
    assert config.sequence_length == 34
    assert config.host == "0.0.0.0"
