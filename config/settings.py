from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Database (SQLite by default, PostgreSQL via postgresql+asyncpg://...)
    database_url: str = "sqlite+aiosqlite:///./scanner.db"
    redis_url: str = ""  # empty = Redis disabled

    # Scanner cadence
    scan_interval_sec: float = 10.0
    scan_send_timeout_sec: float = 2.0  # per-subscriber WebSocket send bound

    # Default eligibility policy (overridable per scan session)
    default_min_cap: float | None = 5000.0
    default_max_cap: float | None = 15000.0
    default_min_volume: float | None = 1000.0
    default_min_liquidity: float | None = 3000.0
    default_require_liquidity_locked: bool = True
    default_require_mint_disabled: bool = True
    default_require_freeze_disabled: bool = True
    default_top_holders_limit: float | None = 30.0

    # Alerts
    alert_channel: str = "alerts:tokens"  # Redis pubsub channel

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_cors_origins: str = "*"  # comma-separated
    api_debug: bool = False
    api_scan_rate_limit: str = "30/minute"  # per client, scan start/stop

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    log_dir: str = "logs"


settings = Settings()
