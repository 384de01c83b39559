"""CLI configuration: env-driven, per-account.

Centralized settings using pydantic-settings for environment variable
support. Reads from a .env file and TOOLBELT_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolbelt import __version__


class ToolbeltConfig(BaseSettings):
    """Toolbelt configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export TOOLBELT_ACCOUNT=acme
        export TOOLBELT_WORKSPACE=dev
        export TOOLBELT_TOKEN=eyJhbGciOi...

    Or via .env file::

        TOOLBELT_REGION=aws-us-east-1
        TOOLBELT_BUILD_START_TIMEOUT=10
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TOOLBELT_",
        env_file_encoding="utf-8",
    )

    # Session
    account: str = ""
    workspace: str = "master"
    token: str = ""

    # Platform endpoints
    region: str = "aws-us-east-1"
    platform_domain: str = "vtex.io"
    request_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".toolbelt")

    # Build monitoring
    builder_channel: str = "vtex.render-builder"
    build_start_timeout: float = 5.0

    @property
    def user_agent(self) -> str:
        """User-Agent header sent with every platform request."""
        return f"toolbelt/{__version__}"

    @property
    def is_master(self) -> bool:
        """Whether the current workspace is the read-only master."""
        return self.workspace == "master"

    def endpoint(self, service: str) -> str:
        """Base URL of a regional platform service (e.g. ``colossus``)."""
        return f"http://{service}.{self.region}.{self.platform_domain}"


# Module-level singleton: import as `from toolbelt.config import config`
config = ToolbeltConfig()
