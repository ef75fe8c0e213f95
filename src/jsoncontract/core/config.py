"""Configuration schema and loading for jsoncontract.

Settings are frozen pydantic models. ``load_settings`` layers a settings file
and ``JSONCONTRACT_*`` environment variables over the model defaults.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class ResolverSettings(BaseModel):
    """Behaviour switches for DefaultContractResolver.

    Example YAML:
        resolver:
          non_public_members: true
          ignore_serializable_attribute: false
    """

    model_config = {"frozen": True, "extra": "forbid"}

    shared_cache: bool = Field(
        default=False,
        description="Share resolved contracts with every resolver of the same class",
    )
    non_public_members: bool = Field(
        default=False,
        description="Discover underscore-prefixed members and allow non-public creation",
    )
    serialize_compiler_generated_members: bool = Field(
        default=False,
        description="Include dunder-named members outside fields mode",
    )
    ignore_serializable_interface: bool = Field(
        default=False,
        description="Do not classify CustomSerializable types as Serializable contracts",
    )
    ignore_serializable_attribute: bool = Field(
        default=True,
        description="Do not switch @serializable classes to fields mode",
    )
    dynamic_code_generation: bool = Field(
        default=True,
        description="Use precompiled accessors instead of getattr/setattr lookups",
    )


class LoggingSettings(BaseModel):
    """Logging output for the CLI."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: str = Field(default="WARNING", description="Root log level")
    json_output: bool = Field(default=False, description="Render log lines as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        normalized = v.upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"level must be one of {sorted(_LOG_LEVELS)}, got {v!r}")
        return normalized


class JsonContractSettings(BaseModel):
    """Top-level settings document."""

    model_config = {"frozen": True, "extra": "forbid"}

    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path | None = None) -> JsonContractSettings:
    """Load settings from a file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (JSONCONTRACT_*) - highest priority
    2. Config file (YAML, TOML or JSON)
    3. Defaults from the pydantic schema - lowest priority

    Environment variable format: JSONCONTRACT_RESOLVER__NON_PUBLIC_MEMBERS=true

    Args:
        config_path: Settings file, or None for environment and defaults only

    Returns:
        Validated JsonContractSettings instance

    Raises:
        ValidationError: If configuration fails pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="JSONCONTRACT",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config: dict[str, Any] = {
        k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys
    }
    return JsonContractSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
