"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IP = "127.0.0.1"
DEFAULT_PORT = 2021


class Settings(BaseSettings):
    """Simulator defaults, overridable from the environment or a .env file.

    Every field maps to ``V2XSIM_<FIELD>``, e.g. ``V2XSIM_FREQUENCY=20``.
    Command-line flags take precedence over these values.
    """

    model_config = SettingsConfigDict(
        env_prefix="V2XSIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transmission
    frequency: int = 10  # Hz, used when a waypoint has no freq override
    repeat: int = 1
    default_ip: str = DEFAULT_IP
    default_port: int = DEFAULT_PORT

    # Tick log
    output_format: str = "csv"  # "csv" or "json"

    # Console narration
    verbose: bool = False
    log_level: str = "INFO"


settings = Settings()
