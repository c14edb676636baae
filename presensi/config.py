import os


class Settings:
    """Application settings read from the environment."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./presensi.db")

    # Identity provider tokens (Supabase-style JWT)
    JWT_SECRET: str = os.getenv("JWT_SECRET", "your-super-secret-key-change-this-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_AUDIENCE: str = os.getenv("JWT_AUDIENCE", "authenticated")

    # Application
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Jakarta")

    # Attendance rules
    LATE_CUTOFF_HOUR: int = int(os.getenv("LATE_CUTOFF_HOUR", "9"))
    LATE_CUTOFF_MINUTE: int = int(os.getenv("LATE_CUTOFF_MINUTE", "15"))
    ATTENDANCE_HISTORY_LIMIT: int = int(os.getenv("ATTENDANCE_HISTORY_LIMIT", "10"))

    # Activity feed
    DASHBOARD_ACTIVITY_LIMIT: int = int(os.getenv("DASHBOARD_ACTIVITY_LIMIT", "5"))
    HISTORY_ACTIVITY_LIMIT: int = int(os.getenv("HISTORY_ACTIVITY_LIMIT", "20"))
    MAX_ACTIVITY_LIMIT: int = int(os.getenv("MAX_ACTIVITY_LIMIT", "100"))

    # Reverse geocoding
    ENABLE_REVERSE_GEOCODING: bool = os.getenv("ENABLE_REVERSE_GEOCODING", "True").lower() == "true"
    GEOCODER_URL: str = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/reverse")
    GEOCODER_TIMEOUT_SECONDS: float = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", "5"))
    GEOCODER_LANGUAGE: str = os.getenv("GEOCODER_LANGUAGE", "id")
    GEOCODER_USER_AGENT: str = os.getenv("GEOCODER_USER_AGENT", "presensi-backend/1.0")

    # Live clock
    CLOCK_TICK_SECONDS: float = float(os.getenv("CLOCK_TICK_SECONDS", "1"))

    # Deployment
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # API
    API_VERSION: str = os.getenv("API_VERSION", "v1")
    API_PREFIX: str = f"/api/{API_VERSION}"

    @property
    def database_url(self) -> str:
        """Database URL, normalising the Heroku/Render `postgres://` scheme."""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    def validate_required_settings(self) -> list:
        """Return the names of required settings that are missing."""
        missing = []

        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")

        if not self.JWT_SECRET or self.JWT_SECRET == "your-super-secret-key-change-this-in-production":
            missing.append("JWT_SECRET")

        if not (0 <= self.LATE_CUTOFF_HOUR <= 23 and 0 <= self.LATE_CUTOFF_MINUTE <= 59):
            missing.append("LATE_CUTOFF_HOUR/LATE_CUTOFF_MINUTE")

        return missing

    def get_logging_config(self) -> dict:
        """Logging configuration for `logging.config.dictConfig`."""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "formatter": "default",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": self.LOG_LEVEL,
                "handlers": ["default"],
            },
        }


settings = Settings()

