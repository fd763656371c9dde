"""Project configuration loaded from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Dict

from dotenv import load_dotenv

from tool_directory.models import EntityKind
from tool_directory.models import TableRef

load_dotenv()

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
PRODUCTION = "production"


class ConfigurationError(RuntimeError):
    """A required configuration value is missing."""


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(f"Environment variable {name} must be set; no fallback is available.")
    return value


def _optional_env(name: str) -> str:
    value = os.getenv(name, "")
    if not value:
        logger.warning(f"Environment variable {name} is not set")
    return value


@dataclass(frozen=True)
class Settings:
    api_url: str
    api_token: str
    tools_table_id: str = ""
    tools_view_id: str = ""
    blog_table_id: str = ""
    blog_view_id: str = ""
    app_env: str = PRODUCTION
    log_level: str = "INFO"
    base_path: str = ""
    web_port: int = 8000

    @property
    def log_request_headers(self) -> bool:
        return self.app_env != PRODUCTION

    def tables(self) -> Dict[EntityKind, TableRef]:
        return {
            EntityKind.TOOL: TableRef(self.tools_table_id, self.tools_view_id),
            EntityKind.BLOG_POST: TableRef(self.blog_table_id, self.blog_view_id),
        }


def load_settings() -> Settings:
    """Read settings from the environment, failing fast on missing credentials."""
    return Settings(
        api_url=_require_env("NOCODB_API_URL"),
        api_token=_require_env("NOCODB_API_TOKEN"),
        tools_table_id=_optional_env("TOOLS_TABLE_ID"),
        tools_view_id=_optional_env("TOOLS_VIEW_ID"),
        blog_table_id=_optional_env("BLOG_TABLE_ID"),
        blog_view_id=_optional_env("BLOG_VIEW_ID"),
        app_env=os.getenv("APP_ENV", PRODUCTION).lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        base_path=os.getenv("BASE_PATH", "").rstrip("/"),
        web_port=int(os.getenv("WEB_PORT", "8000")),
    )
