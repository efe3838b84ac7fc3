from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0
    redis_url: str | None = None  # overrides host/port/db when set
    redis_connect_retries: int = 5
    redis_connect_base_delay_seconds: float = 0.5

    # Counter
    counter_name: str = "events"
    counter_timestep_seconds: int = 60
    counter_ttl_seconds: int = 86400  # 1 day of inactivity
    counter_propagate_expiry_errors: bool = True
    counter_inclusive_end: bool = True

    # Logging
    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "authorization",
    ]

    otel_service_name: str = "bucket-counter"
    app_environment: str = "production"

    def resolved_redis_url(self) -> str:
        if self.redis_url:
            return self.redis_url
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


settings = Settings()
