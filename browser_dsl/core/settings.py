"""
集中式配置（环境变量/ .env），保障可测性与可控性。
"""
# @file purpose: Centralized settings using Pydantic Settings.

from pydantic import BaseModel, PositiveFloat
from pydantic_settings import BaseSettings, SettingsConfigDict


class WaitPreset(BaseModel):
    """A named timeout/interval pair usable as wait_for(preset=...)."""

    timeout: PositiveFloat
    interval: PositiveFloat


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BDSL_", env_file=".env", extra="ignore")

    headless: bool = True
    request_timeout_seconds: int = 30
    base_url: str | None = None
    wait_timeout_seconds: PositiveFloat = 5.0
    wait_interval_seconds: PositiveFloat = 0.5
    wait_presets: dict[str, WaitPreset] = {
        "quick": WaitPreset(timeout=1.0, interval=0.1),
        "slow": WaitPreset(timeout=20.0, interval=1.0),
    }
    log_level: str = "INFO"


settings = Settings()
