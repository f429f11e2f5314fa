from __future__ import annotations

import logging

from graphlink.config import settings


def configure_logging(level: str | None = None) -> None:
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
