"""
FastAPI dependencies.
"""

from typing import Generator
from sqlalchemy.orm import Session
from pocketledger.database import SessionLocal
from pocketledger.services.detection_config import DetectionConfig, get_detection_config


def get_db() -> Generator[Session, None, None]:
    """Request-scoped database session."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_config() -> DetectionConfig:
    """Detection policy for the request. Tests override this to swap lists."""
    return get_detection_config()
