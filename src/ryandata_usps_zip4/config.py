"""Environment-sourced settings for the command line tools.

Library functions never read the environment; they take the password and
credentials as arguments. Only the CLI builds a ``Zip4Settings`` and passes
values down.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ryandata_usps_zip4.models.errors import ConfigurationError

DEFAULT_SMARTY_URL = "https://us-zipcode.api.smarty.com/lookup"

# Setting name -> environment variable
ENV_VARS: dict[str, str] = {
    "zip_password": "ZIP_PASSWORD",
    "city_state_password": "CITYSTATE_PWD",
    "smarty_auth_id": "AUTH_ID",
    "smarty_auth_token": "AUTH_TOKEN",
    "smarty_base_url": "SMARTY_BASE_URL",
}


class Zip4Settings(BaseModel):
    """Credentials and endpoints used by the CLI."""

    model_config = ConfigDict(frozen=True)

    zip_password: Optional[str] = Field(
        default=None, description="Password protecting the encrypted ZIP+4 zip members"
    )
    city_state_password: Optional[str] = Field(
        default=None,
        description="Password protecting ctystate.zip members; defaults to zip_password",
    )
    smarty_auth_id: Optional[str] = Field(default=None, description="Smarty API auth-id")
    smarty_auth_token: Optional[str] = Field(default=None, description="Smarty API auth-token")
    smarty_base_url: str = Field(default=DEFAULT_SMARTY_URL, description="Smarty lookup URL")

    @model_validator(mode="before")
    @classmethod
    def _default_city_state_password(cls, data: Any) -> Any:
        # USPS usually protects both archive types with the same secret
        if isinstance(data, dict) and not data.get("city_state_password"):
            data = {**data, "city_state_password": data.get("zip_password")}
        return data

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Zip4Settings:
        """Load settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (mainly for testing).

        Returns:
            Settings with every variable that is present; absent ones stay at defaults.
        """
        env = os.environ if environ is None else environ
        values = {field: env[var] for field, var in ENV_VARS.items() if env.get(var)}
        return cls(**values)

    def require(self, name: str) -> str:
        """Get a setting that must be present.

        Args:
            name: Setting name, e.g. "zip_password".

        Returns:
            The setting value.

        Raises:
            ConfigurationError: If the setting was not provided.
        """
        value = getattr(self, name)
        if not value:
            raise ConfigurationError.create(
                "missing environment variable {variable}",
                {"setting": name, "variable": ENV_VARS.get(name, name.upper())},
            )
        return value
