from decimal import Decimal

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str

    # Comma-separated, e.g. "http://localhost:5173,https://ops.example.com"
    cors_origins: str = ""
    log_level: str = "INFO"

    # Fallback when a company row has no timezone
    default_timezone: str = "Australia/Sydney"

    # GPS verification (metres)
    distance_warning_meters: float = 500
    distance_danger_meters: float = 2000
    default_gps_check_in_radius: int = 100

    # Time log costing / invoicing
    default_overhead_percentage: Decimal = Decimal("30")
    gst_rate: Decimal = Decimal("0.10")

    # Per-worker check-in throttle
    check_in_rate_limit: int = 10
    check_in_rate_window_seconds: int = 60

    next_slot_max_attempts: int = 20

    class Config:
        env_file = ".env"

settings = Settings()
