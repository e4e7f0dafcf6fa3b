from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


def configure_logging(level: str | int = logging.INFO, log_dir: Path | None = None) -> None:
    """Console logging, plus a per-day ``<log_dir>/YYYY-MM-DD.log`` file when ``log_dir`` is set."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{date.today().isoformat()}.log"
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
