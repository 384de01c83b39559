"""App manifest models (``manifest.json``)."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

APP_NAME_PATTERN = re.compile(r"^[a-z0-9\-_]+$")


class AppLocator(BaseModel):
    """``vendor.name@version`` split into its parts."""

    model_config = ConfigDict(frozen=True)

    vendor: str
    name: str
    version: str = ""

    @property
    def app_id(self) -> str:
        base = f"{self.vendor}.{self.name}"
        return f"{base}@{self.version}" if self.version else base


class Manifest(BaseModel):
    """The app manifest. Unknown keys are preserved on round-trip."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    vendor: str
    name: str
    version: str
    title: str = ""
    description: str = ""
    must_update_at: str = Field(default="", alias="mustUpdateAt")
    registries: list[str] = []
    dependencies: dict[str, str] = {}

    @property
    def app_id(self) -> str:
        """Fully qualified app identifier, ``vendor.name@version``."""
        return f"{self.vendor}.{self.name}@{self.version}"

    @property
    def locator(self) -> AppLocator:
        return AppLocator(vendor=self.vendor, name=self.name, version=self.version)
