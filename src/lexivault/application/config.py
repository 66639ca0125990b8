from datetime import tzinfo
from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexivault.domain.constants import DISTRACTOR_COUNT, MISSION_MIN_SIZE, MISSION_RATIO


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/lexivault/config.toml",
        Path.home() / ".lexivault.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for lexivault.
    Supports loading from:
    1. Environment variables (LEXIVAULT_*)
    2. Config file (~/.config/lexivault/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIVAULT_",
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/lexivault")
    backend: Literal["json", "memory"] = "json"

    # Calendar
    timezone: str | None = None  # IANA name; None uses the system local zone
    streak_resets_on_gap: bool = False

    # Missions & quiz
    mission_min_size: int = Field(default=MISSION_MIN_SIZE, ge=1)
    mission_ratio: float = Field(default=MISSION_RATIO, gt=0.0, le=1.0)
    distractor_count: int = Field(default=DISTRACTOR_COUNT, ge=0)
    seed: int | None = None

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Find the first existing file
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Init (CLI) overrides win, then env, then the TOML file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        try:
            ZoneInfo(v)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    @property
    def tz(self) -> tzinfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/lexivault/config.toml (if exists)
    3. Environment variables (LEXIVAULT_*)
    4. cli_overrides (passed from Typer, None values dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
