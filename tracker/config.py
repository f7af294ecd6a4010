# tracker/config.py

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from loguru import logger

load_dotenv(dotenv_path=".env")

DEFAULT_KNOWLEDGE_PATH = Path(__file__).resolve().parent / "data" / "health_knowledge.json"


@dataclass
class Settings:
    db_path: str = "healthtracker.db"
    knowledge_path: str = str(DEFAULT_KNOWLEDGE_PATH)
    log_level: str = "INFO"
    extra_stop_words: List[str] = field(default_factory=list)
    country_code: str = "+91"


def _split_words(raw: str) -> List[str]:
    return [w.strip().lower() for w in raw.split(",") if w.strip()]


def get_settings() -> Settings:
    """Read HEALTHTRACK_* environment variables (a .env file is honoured)."""
    return Settings(
        db_path=os.getenv("HEALTHTRACK_DB_PATH", "healthtracker.db"),
        knowledge_path=os.getenv("HEALTHTRACK_KNOWLEDGE_PATH", str(DEFAULT_KNOWLEDGE_PATH)),
        log_level=os.getenv("HEALTHTRACK_LOG_LEVEL", "INFO"),
        extra_stop_words=_split_words(os.getenv("HEALTHTRACK_EXTRA_STOP_WORDS", "")),
        country_code=os.getenv("HEALTHTRACK_COUNTRY_CODE", "+91"),
    )


def configure_logging(level: str = "INFO"):
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
