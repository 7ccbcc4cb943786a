# agroclima_ceara/utils/logger.py
from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger do módulo; quem configura a saída é a CLI (setup_logging)."""
    return logging.getLogger(name)


def setup_logging(level: int = logging.INFO) -> None:
    # basicConfig não faz nada se o root já tiver handler
    logging.basicConfig(level=level, format=LOG_FORMAT)
