from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # mlb stats api
    mlb_stats_base_url: str = "https://statsapi.mlb.com/api/v1"

    # balldontlie
    balldontlie_base_url: str = "https://api.balldontlie.io/v1"
    balldontlie_api_key: str | None = Field(default=None, repr=False)

    # espn public scoreboard
    espn_base_url: str = "https://site.api.espn.com/apis/site/v2/sports"

    # football-data.org
    football_data_base_url: str = "https://api.football-data.org/v4"
    football_data_api_key: str | None = Field(default=None, repr=False)
    football_data_competition: str = "2021"

    # Resolution policy
    local_timezone: str = "UTC"
    lookahead_days: int = 30
    demo_live_data: bool = True

    # Transport
    http_timeout_s: float = 30.0
    http_connect_timeout_s: float = 10.0
    http_cache_enabled: bool = True

    log_level: str = "INFO"

    # -----------------------------
    # Optional-key helpers
    # -----------------------------

    def balldontlie_headers(self) -> dict[str, str]:
        if not self.balldontlie_api_key:
            return {}
        return {"Authorization": self.balldontlie_api_key}

    def football_data_headers(self) -> dict[str, str]:
        if not self.football_data_api_key:
            return {}
        return {"X-Auth-Token": self.football_data_api_key}


settings = Settings()
