from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from spacelearn.domain.constants import DEFAULT_SUPABASE_TABLE, INTERVALS, REQUEST_TIMEOUT
from spacelearn.domain.policy import IntervalPolicy

CONFIG_FILES = [
    Path.home() / ".config/spacelearn/config.toml",
    Path.home() / ".spacelearn.toml",
]


class AppConfig(BaseSettings):
    """
    Configuration model for SpaceLearn.
    Supports loading from:
    1. Environment variables (SPACELEARN_*)
    2. Config file (~/.config/spacelearn/config.toml or ~/.spacelearn.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="SPACELEARN_",
        extra="ignore",
    )

    # Storage
    backend: Literal["memory", "json", "supabase"] = "json"
    data_file: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/spacelearn/entries.json"
    )
    supabase_url: str | None = None
    supabase_key: str | None = None
    supabase_table: str = DEFAULT_SUPABASE_TABLE
    request_timeout: float = REQUEST_TIMEOUT

    # Scheduling
    intervals: list[int] = Field(default_factory=lambda: list(INTERVALS))

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

        # First existing file wins
        toml_file = next((f for f in CONFIG_FILES if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_file", mode="before")
    @classmethod
    def resolve_data_file(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("supabase_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Any) -> str | None:
        if not v:
            return None
        return str(v).rstrip("/")

    @field_validator("intervals")
    @classmethod
    def validate_intervals(cls, v: list[int]) -> list[int]:
        # Raises ValueError, which pydantic reports as a validation error
        IntervalPolicy.from_days(v)
        return v

    def policy(self) -> IntervalPolicy:
        return IntervalPolicy.from_days(self.intervals)


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/spacelearn/config.toml (if exists)
    3. Environment variables (SPACELEARN_*)
    4. cli_overrides (passed from Typer); None values are ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
