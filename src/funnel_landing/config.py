"""Runtime settings: defaults, optional YAML file, then environment variables."""

import os
from pathlib import Path
from typing import Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for settings loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field

from funnel_landing.connectors.nicoka import constants

# env var -> settings field
_ENV_VARS = {
    "NICOKA_SUBDOMAIN": "nicoka_subdomain",
    "NICOKA_API_TOKEN": "nicoka_api_token",
    "FUNNEL_LANDING_DB": "db_path",
    "FUNNEL_LANDING_CACHE_MAX_AGE": "cache_max_age",
}


class Settings(BaseModel):
    """Connection, storage and throttling settings."""

    nicoka_subdomain: str = constants.DEFAULT_SUBDOMAIN
    nicoka_api_token: Optional[str] = Field(default=None, repr=False)

    db_path: Path = Path("funnel_landing.db")
    cache_max_age: float = Field(default=30 * 60, gt=0, description="Seconds before a snapshot is stale")

    page_size: int = Field(default=constants.PAGE_SIZE, gt=0)
    rate_limit_delay: float = Field(default=constants.RATE_LIMIT_DELAY, ge=0)
    retry_delay: float = Field(default=constants.RETRY_DELAY, ge=0)
    max_retries: int = Field(default=constants.MAX_RETRIES, ge=1)
    reference_ttl: float = Field(default=constants.REFERENCE_TTL, gt=0)
    http_timeout: float = Field(default=30.0, gt=0)

    @classmethod
    def load(cls, path: str | Path | None = None, env: Optional[dict[str, str]] = None) -> "Settings":
        """
        Build settings from an optional YAML file, overridden by environment variables.
        The file may nest connection keys under ``nicoka:`` or keep them flat.
        """
        data: dict = {}
        if path is not None:
            loaded = yaml.safe_load(Path(path).read_text()) or {}
            nicoka = loaded.pop("nicoka", {}) or {}
            if "subdomain" in nicoka:
                data["nicoka_subdomain"] = nicoka["subdomain"]
            if "api_token" in nicoka:
                data["nicoka_api_token"] = nicoka["api_token"]
            data.update(loaded)

        environ = os.environ if env is None else env
        for var, field_name in _ENV_VARS.items():
            value = environ.get(var)
            if value:
                data[field_name] = value
        return cls.model_validate(data)

    def connector_kwargs(self) -> dict:
        """Keyword arguments for NicokaConnector."""
        return {
            "subdomain": self.nicoka_subdomain,
            "api_token": self.nicoka_api_token,
            "page_size": self.page_size,
            "rate_limit_delay": self.rate_limit_delay,
            "retry_delay": self.retry_delay,
            "max_retries": self.max_retries,
            "reference_ttl": self.reference_ttl,
            "timeout": self.http_timeout,
        }
