from sqlalchemy import text

from blockthetweet.inference.service import Prediction
from blockthetweet.storage.sink import PredictionSink


def make_sink(tmp_path):
    return PredictionSink(f"sqlite:///{tmp_path / 'sink.sqlite'}")


def test_write_prediction_deduplicates_by_hash(tmp_path):
    sink = make_sink(tmp_path)
    prediction = Prediction(raw_text="hello", content_hash=2 ** 64 - 1, confidence=0.3, latency_ns=1200)

    assert sink.write_prediction(prediction) is True
    assert sink.write_prediction(prediction) is False
    assert sink.count_predictions() == 1

    with sink.engine.connect() as conn:
        row = conn.execute(text("SELECT text_hash, text, nanosecond FROM predictions")).one()
    assert tuple(row) == (str(2 ** 64 - 1), "hello", 1200)
    sink.close()


def test_write_log(tmp_path):
    sink = make_sink(tmp_path)
    assert sink.write_log("error", "model forward failed")
    with sink.engine.connect() as conn:
        rows = conn.execute(text("SELECT log_type, message FROM logs")).all()
    assert [tuple(r) for r in rows] == [("error", "model forward failed")]
    sink.close()
