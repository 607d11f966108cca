"""Configuration management for Studydesk."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.expenses import EXPENSE_CATEGORIES
from .core.quotes import DEFAULT_TAGS
from .core.records import DEFAULT_MIN_ATTENDANCE

logger = logging.getLogger(__name__)

STUDYDESK_HOME = Path(os.environ.get("STUDYDESK_HOME", Path.home() / "studydesk"))
CONFIG_FILE = STUDYDESK_HOME / "config" / "studydesk.conf"
DATA_DIR = STUDYDESK_HOME / "data"
ATTACHMENTS_DIR = STUDYDESK_HOME / "attachments"

QUOTE_API_URL = "https://api.quotable.io/random"


@dataclass
class Config:
    """Studydesk configuration."""

    owner_id: str = ""
    data_dir: str = ""
    attachments_dir: str = ""
    quote_api_url: str = QUOTE_API_URL
    quote_tags: list[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    quote_timeout: float = 5.0
    default_min_attendance: int = DEFAULT_MIN_ATTENDANCE
    expense_categories: list[str] = field(default_factory=lambda: list(EXPENSE_CATEGORIES))

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser() if self.data_dir else DATA_DIR

    @property
    def attachments_path(self) -> Path:
        return Path(self.attachments_dir).expanduser() if self.attachments_dir else ATTACHMENTS_DIR


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _split_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def load_config(path: Path | None = None) -> Config:
    """Load configuration from studydesk.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            match key:
                case "owner_id":
                    config.owner_id = value
                case "data_dir":
                    config.data_dir = value
                case "attachments_dir":
                    config.attachments_dir = value
                case "quote_api_url":
                    config.quote_api_url = value
                case "quote_tags":
                    config.quote_tags = _split_list(value)
                case "quote_timeout":
                    try:
                        config.quote_timeout = float(value)
                    except ValueError:
                        logger.warning(f"Invalid QUOTE_TIMEOUT {value!r}, keeping {config.quote_timeout}")
                case "default_min_attendance":
                    try:
                        minimum = int(value)
                    except ValueError:
                        minimum = -1
                    if 0 <= minimum <= 100:
                        config.default_min_attendance = minimum
                    else:
                        logger.warning(
                            f"Invalid DEFAULT_MIN_ATTENDANCE {value!r}, keeping {config.default_min_attendance}"
                        )
                case "expense_categories":
                    config.expense_categories = _split_list(value)
                case _:
                    logger.debug(f"Ignoring unknown config key: {key}")

    if os.environ.get("STUDYDESK_OWNER"):
        config.owner_id = os.environ["STUDYDESK_OWNER"]

    return config
