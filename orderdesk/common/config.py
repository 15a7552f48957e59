"""Central environment-driven settings for the order desk API.

The process loads this once at startup. Behavior is controlled by environment
variables (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "orderdesk"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    public_url: str = "http://localhost:3000"
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "orderdesk"
    mongo_timeout_ms: int = 3000
    payment_delay_seconds: float = 3.0
    payment_poll_interval_seconds: float = 0.1
    enforce_status_transitions: bool = False
    tracing_enabled: bool = False
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
