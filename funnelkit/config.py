"""Environment-driven settings and logging setup."""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()  # load environment variables from .env file

DEFAULT_DB_PATH = Path(__file__).parent / "data" / "funnel.db"
FUNNEL_DB_PATH = Path(os.getenv("FUNNEL_DB_PATH", str(DEFAULT_DB_PATH)))

# well-known key the editor stores its single funnel under
FUNNEL_STORAGE_KEY = os.getenv("FUNNEL_STORAGE_KEY", "cartpanda-funnel-data")

FUNNEL_LOG_LEVEL = os.getenv("FUNNEL_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Attach an ISO-timestamped stream handler to the funnelkit loggers."""
    root = logging.getLogger("funnelkit")
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
    root.setLevel(level or FUNNEL_LOG_LEVEL)
