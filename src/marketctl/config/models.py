"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, marketctl.toml only contains
overrides.  A fresh install needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- marketctl.toml sections ---


class MarketConfig(BaseModel):
    """[market] section."""

    model_config = {"frozen": True}

    name: str = "marketplace"
    currency: str = "USD"


class UsersConfig(BaseModel):
    """[users] section."""

    model_config = {"frozen": True}

    default_reputation: int = Field(default=100, ge=0, le=100)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True


class MarketFileConfig(BaseModel):
    """Root configuration composing all TOML sections."""

    model_config = {"frozen": True}

    market: MarketConfig = Field(default_factory=MarketConfig)
    users: UsersConfig = Field(default_factory=UsersConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
