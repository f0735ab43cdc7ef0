# appflow/config.py
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="APPFLOW_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "AppFlow Builder"
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="WARNING")
    json_logs: bool = Field(default=False)

    storage_backend: Literal["file", "sqlite"] = Field(default="file")
    projects_file: str = Field(default="./appflow_projects.json")
    database_url: str = Field(default="sqlite:///./appflow.db")

    default_platform: Literal["web", "mobile"] = Field(default="web")
    node_spacing_y: float = Field(default=350.0)
    max_gateway_hops: int = Field(default=16, ge=1)

    enable_smart_wiring: bool = Field(default=True)
    preview_follow_gateways: bool = Field(default=True)

    continue_label: str = Field(default="Continue")
    proceed_label: str = Field(default="Proceed")
    back_label: str = Field(default="← Back")
    header_bar_label: str = Field(default="Header Bar")
    footer_group_label: str = Field(default="Footer Actions")


class Features:
    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def smart_wiring(self) -> bool:
        return self._settings.enable_smart_wiring

    @property
    def follow_gateways(self) -> bool:
        return self._settings.preview_follow_gateways

    @property
    def sqlite_storage(self) -> bool:
        return self._settings.storage_backend == "sqlite"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
