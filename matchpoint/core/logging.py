# matchpoint/core/logging.py
import logging

from matchpoint.core.config import settings


def setup_logging() -> None:
    """Configure root logging once at process start."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
