# src/collectorscope/settings.py
"""
Settings for the collectorscope command line.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class CollectorscopeSettings(BaseModel):
    """Runtime settings.

    Example YAML:
        log_level: DEBUG
        json_logs: true
        output_format: json
    """

    model_config = {"frozen": True}

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level for log output",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON instead of console text",
    )
    output_format: Literal["console", "json"] = Field(
        default="console",
        description="Format for command results on stdout",
    )
    seal_registries: bool = Field(
        default=True,
        description="Freeze parser registries once plugins are loaded",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.upper()
        return v


def load_settings(config_path: Path | None = None) -> CollectorscopeSettings:
    """Load settings from an optional YAML file with environment overrides.

    Precedence:
    1. Environment variables (COLLECTORSCOPE_*) - highest priority
    2. Settings file
    3. Defaults from the Pydantic schema - lowest priority

    Args:
        config_path: Path to a YAML settings file, or None for env/defaults only

    Returns:
        Validated CollectorscopeSettings instance

    Raises:
        ValidationError: If settings fail Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Settings file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="COLLECTORSCOPE",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    # and drop its own bookkeeping settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_settings = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return CollectorscopeSettings(**raw_settings)
