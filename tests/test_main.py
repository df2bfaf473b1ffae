from pathlib import Path

import pytest
import uvicorn

import main


ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


def run_main(monkeypatch, *args):
    monkeypatch.chdir(ROOT)
    monkeypatch.setattr("sys.argv", ["main.py", "--config", "config.stub.yaml", *args])
    main.main()


def test_missing_vocabulary_exits_before_serving(monkeypatch, tmp_path, uvicorn_calls):
    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, "--vocabulary", str(tmp_path / "missing.json"))
    assert exc_info.value.code == 1
    assert uvicorn_calls == []


def test_missing_model_exits_before_serving(monkeypatch, tmp_path, uvicorn_calls):
    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, "--model", str(tmp_path / "missing.pt"))
    assert exc_info.value.code == 1
    assert uvicorn_calls == []


def test_invalid_sequence_length_exits(monkeypatch, uvicorn_calls):
    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, "--sequence-length", "0")
    assert exc_info.value.code == 1
    assert uvicorn_calls == []


def test_serves_once_resources_load(monkeypatch, uvicorn_calls):
    run_main(monkeypatch, "--port", "3001")
    assert len(uvicorn_calls) == 1
    app, kwargs = uvicorn_calls[0]
    assert kwargs["port"] == 3001
    assert app.state.service.sequence_length == 295
