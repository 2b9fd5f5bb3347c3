"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./vms_sync.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── VMS Connections ───────────────────────────────────────────────────
    # Leave a *_HOST empty to mark that vendor as not configured.
    VMS_USER: str = "admin"
    VMS_SCHEME: str = "http"
    VMS_VERIFY_TLS: bool = False    # NVRs ship self-signed certificates

    DAHUA_HOST: str = ""
    DAHUA_PORT: int = 80
    DAHUA_PASSWORD: str = "CHANGE_ME"
    DAHUA_ENABLED: bool = True

    EMSTONE_HOST: str = ""
    EMSTONE_PORT: int = 80
    EMSTONE_PASSWORD: str = "CHANGE_ME"
    EMSTONE_ENABLED: bool = True

    HANWHA_HOST: str = ""
    HANWHA_PORT: int = 80
    HANWHA_PASSWORD: str = "CHANGE_ME"
    HANWHA_ENABLED: bool = True

    NAIZ_HOST: str = ""
    NAIZ_PORT: int = 8002
    NAIZ_PASSWORD: str = "CHANGE_ME"
    NAIZ_ENABLED: bool = True

    # ── Synchronization ───────────────────────────────────────────────────
    VMS_REQUEST_TIMEOUT_SECONDS: float = 10.0   # per HTTP request (connect + read)
    VMS_SYNC_TIMEOUT_SECONDS: float = 30.0      # whole fetch + extract for one vendor
    SYNC_INTERVAL_SECONDS: int = 0              # 0 disables the periodic sync loop

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── VMS map ───────────────────────────────────────────────────────────
    @property
    def VMS(self) -> dict:
        return {
            "dahua":   {"host": self.DAHUA_HOST, "port": self.DAHUA_PORT, "user": self.VMS_USER,
                        "password": self.DAHUA_PASSWORD, "enabled": self.DAHUA_ENABLED},
            "emstone": {"host": self.EMSTONE_HOST, "port": self.EMSTONE_PORT, "user": self.VMS_USER,
                        "password": self.EMSTONE_PASSWORD, "enabled": self.EMSTONE_ENABLED},
            "hanwha":  {"host": self.HANWHA_HOST, "port": self.HANWHA_PORT, "user": self.VMS_USER,
                        "password": self.HANWHA_PASSWORD, "enabled": self.HANWHA_ENABLED},
            "naiz":    {"host": self.NAIZ_HOST, "port": self.NAIZ_PORT, "user": self.VMS_USER,
                        "password": self.NAIZ_PASSWORD, "enabled": self.NAIZ_ENABLED},
        }

    @property
    def CONFIGURED_VMS(self) -> dict:
        """Only the vendors that have a host and are enabled."""
        return {k: v for k, v in self.VMS.items() if v["host"] and v["enabled"]}

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
