"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class PreloadSettings(BaseSettings):
    """Preloader configuration."""

    base_url: str = "https://rubygems.org/"
    timeout: float = 10.0
    user_agent: str = "GemPreloader/0.1 (+https://github.com/gem-preloader)"
    max_connections: int = 100
    max_keepalive_connections: int = 20
    workers: int = 20

    model_config = {"env_prefix": "PRELOAD_"}


settings = PreloadSettings()
