from functools import lru_cache

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseModel):
    worker_timeout_seconds: float = 120.0
    use_background_worker: bool = True
    max_pages: int = 100  # Safety limit on Log Source pagination
    infer_threat_reduction: bool = False


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    debug: bool = False
    log_level: str = "INFO"
    default_config_key: str = ""  # empty = resolve from report metadata
    engine: EngineConfig = EngineConfig()

    @model_validator(mode="after")
    def _check_cross_field_deps(self):
        if self.engine.worker_timeout_seconds <= 0:
            raise ValueError(
                "ENGINE__WORKER_TIMEOUT_SECONDS must be > 0"
            )
        if self.engine.max_pages < 1:
            raise ValueError("ENGINE__MAX_PAGES must be >= 1")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
