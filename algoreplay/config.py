"""Centralized config loading — read once at import time."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Load .env from project root (parent of algoreplay/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"
CONFIG_PATH = Path(os.environ.get("ALGOREPLAY_CONFIG", DEFAULT_CONFIG_PATH))

_config = yaml.safe_load(CONFIG_PATH.read_text())

if os.environ.get("ALGOREPLAY_LOG_LEVEL"):
    _config.setdefault("logging", {})["level"] = os.environ["ALGOREPLAY_LOG_LEVEL"]


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config
