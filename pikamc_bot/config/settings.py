from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _norm_url(raw: Any) -> str:
    return ("" if raw is None else str(raw)).strip().rstrip("/")


class Settings(BaseSettings):
    """
    Bot settings, loaded once at startup from the environment (and `.env` if present).

    Notes:
    - Immutable once loaded; pass the instance around instead of re-reading env.
    - Secrets are NOT validated here. A missing panel/AI key surfaces as a
      reported request failure, a missing Discord token as a login failure.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        frozen=True,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # -------------------------
    # Discord
    # -------------------------
    discord_token: str = Field(default="", alias="DISCORD_TOKEN")
    # Admin channel that receives panel error alerts
    error_channel_id: Optional[int] = Field(default=None, alias="ERROR_CHANNEL_ID")

    # -------------------------
    # PikaMC panel (client API)
    # -------------------------
    pikamc_base_url: str = Field(default="https://cp.pikamc.vn/api/client", alias="PIKAMC_BASE_URL")
    # Web UI, only used for the "manage server" link logged on ready
    pikamc_panel_url: str = Field(default="https://cp.pikamc.vn", alias="PIKAMC_PANEL_URL")
    pikamc_api_key: str = Field(default="", alias="PIKAMC_API_KEY")
    pikamc_server_id: str = Field(default="", alias="PIKAMC_SERVER_ID")

    # -------------------------
    # DeepSeek (OpenAI-compatible chat completions)
    # -------------------------
    deepseek_base_url: str = Field(default="https://api.deepseek.com/v1", alias="DEEPSEEK_BASE_URL")
    deepseek_api_key: str = Field(default="", alias="DEEPSEEK_API_KEY")
    deepseek_model: str = Field(default="deepseek-chat", alias="DEEPSEEK_MODEL")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("pikamc_base_url", "pikamc_panel_url", "deepseek_base_url", mode="before")
    @classmethod
    def _norm_urls(cls, v: Any) -> str:
        return _norm_url(v)

    @field_validator("pikamc_api_key", "pikamc_server_id", "deepseek_api_key", "discord_token", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("deepseek_model", mode="before")
    @classmethod
    def _norm_model(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "deepseek-chat"

    @field_validator("error_channel_id", mode="before")
    @classmethod
    def _norm_channel_id(cls, v: Any) -> Optional[int]:
        # Discord snowflake; blank or garbage means "no admin channel".
        if v is None or isinstance(v, int):
            return v
        s = str(v).strip()
        if not s.isdigit():
            return None
        return int(s)

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def panel_server_url(self) -> str:
        return f"{self.pikamc_panel_url}/server/{self.pikamc_server_id}"


settings = Settings()

__all__ = ["Settings", "settings"]
