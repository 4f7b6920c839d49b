"""Environment configuration for the Fathom MCP Server.

When you run the server, use the following environment variables to
configure it:

```bash
export FATHOM_API_KEY="your-api-key"
export FATHOM_OUTPUT_DIR="~/Documents/fathom"
export FATHOM_LOG_LEVEL=DEBUG
```

These are rendered to the AppConfig class and can be accessed like this:

```python
from fathom_mcp_server.config import load_config
cfg = load_config()
print(cfg.export_dir)
```
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigError

FATHOM_API_BASE = "https://api.fathom.ai/external/v1"


def _expand_path(p: str | Path | None) -> Path | None:
    """Expand ~ and environment variables in a path-like value."""
    if p is None or p == "":
        return None
    if isinstance(p, Path):
        s = str(p)
    else:
        s = p
    return Path(os.path.expanduser(os.path.expandvars(s)))


class AppConfig(BaseSettings):
    """Application configuration settings loaded from environment variables.

    All environment variables are prefixed with FATHOM_ (e.g., FATHOM_API_KEY).
    Paths are automatically expanded to resolve ~ and environment variables.
    """

    # ---- credentials / upstream ----
    api_key: str = Field(
        default="",
        description="Fathom API key sent as the X-Api-Key header",
    )
    api_base: str = Field(
        default=FATHOM_API_BASE, description="Base URL of the Fathom external API"
    )

    # ---- export ----
    output_dir: Optional[Path] = Field(
        default=None,
        description="Root directory for exports; a 'transcripts' folder is created inside",
    )

    # ---- network tuning ----
    timeout_seconds: float = Field(
        default=30.0, description="Network request timeout in seconds"
    )

    # ---- logging ----
    log_level: str = Field(default="INFO", description="Log level for stderr logs")
    log_json: bool = Field(
        default=False, description="Render logs as JSON instead of console text"
    )

    # pydantic-settings v2 config
    model_config = SettingsConfigDict(
        env_prefix="FATHOM_",
        case_sensitive=False,
        env_file=(".env",),  # will read if present
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,  # make settings immutable
    )

    # ---- validators ----
    @field_validator("output_dir", mode="before")
    @classmethod
    def _expand_all_paths(cls, v):
        return _expand_path(v)

    @field_validator("api_base")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # ---- derived conveniences (no mutation) ----
    @property
    def export_dir(self) -> Path:
        """Default directory for markdown exports."""
        root = self.output_dir if self.output_dir is not None else Path.cwd()
        return root / "transcripts"


def load_config() -> AppConfig:
    """Load and validate application configuration from environment variables.

    • All variables are prefixed with FATHOM_ (e.g., FATHOM_API_KEY).
    • Missing values fall back to the documented defaults.
    • Paths expand ~ and ${VARS}.

    Raises:
        ConfigError: If FATHOM_API_KEY is not set.
    """
    config = AppConfig()
    if not config.api_key:
        raise ConfigError("FATHOM_API_KEY environment variable is required")
    return config
