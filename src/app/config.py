"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "CARSIM"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8001

    # Simulation engine
    simulation_enabled: bool = True
    tick_interval: float = 0.1  # seconds between ticks (10 Hz)


settings = Settings()
