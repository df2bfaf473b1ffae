"""
Optional persistence for predictions and server-side log events.
Written after the response is sent; a failing sink never affects a request.
"""

import logging
from datetime import datetime

from sqlalchemy import create_engine, Column, Integer, String, Text, Float, DateTime
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

from ..errors import StartupFailure


logger = logging.getLogger("blockthetweet.storage")

Base = declarative_base()


class PredictionRecord(Base):
    __tablename__ = "predictions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, default=datetime.utcnow)
    # uint64 does not fit SQLite's signed INTEGER
    text_hash = Column(String(20), unique=True, index=True)
    text = Column(Text)
    confidence = Column(Float)
    nanosecond = Column(Integer)


class LogRecord(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime, default=datetime.utcnow)
    log_type = Column(String(32))
    message = Column(Text)


class PredictionSink:
    """
    SQLAlchemy-backed sink. One row per distinct text (deduplicated by content hash).
    """

    def __init__(self, database_url: str):
        """
        Open the database and create tables if they do not exist.

        Args:
            database_url: SQLAlchemy URL, e.g. sqlite:///./block_the_tweet.sqlite

        Raises:
            StartupFailure: If the database cannot be opened
        """
        try:
            connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
            self.engine = create_engine(database_url, connect_args=connect_args)
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StartupFailure(f"cannot open database {database_url}: {e}") from e
        self.Session = sessionmaker(bind=self.engine, autoflush=False)

    def write_prediction(self, prediction) -> bool:
        """
        Store a prediction unless its text hash is already stored.

        Args:
            prediction: Prediction from the classification service

        Returns:
            True if a new row was written
        """
        key = str(prediction.content_hash)
        session = self.Session()
        try:
            if session.query(PredictionRecord.id).filter_by(text_hash=key).first() is not None:
                return False
            session.add(PredictionRecord(
                text_hash=key,
                text=prediction.raw_text,
                confidence=prediction.confidence,
                nanosecond=prediction.latency_ns,
            ))
            session.commit()
            return True
        except IntegrityError:
            # Same text stored concurrently by another request
            session.rollback()
            return False
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to write prediction %s", key)
            return False
        finally:
            session.close()

    def write_log(self, log_type: str, message: str) -> bool:
        """Store a server-side log event (e.g. an inference failure)."""
        session = self.Session()
        try:
            session.add(LogRecord(log_type=log_type, message=message))
            session.commit()
            return True
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Failed to write %s log", log_type)
            return False
        finally:
            session.close()

    def count_predictions(self) -> int:
        session = self.Session()
        try:
            return session.query(PredictionRecord).count()
        finally:
            session.close()

    def close(self):
        self.engine.dispose()
