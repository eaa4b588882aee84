from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./habitline.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Scoring defaults, used until a scoring_config row is saved.
    SCORING_MULTIPLIER_PRODUCTIVITY: float = 1.5
    SCORING_MULTIPLIER_HEALTH: float = 1.3
    SCORING_MULTIPLIER_GROWTH: float = 1.0
    SCORING_TARGET_FRACTION: float = 0.85
    SCORING_VICE_CAP: float = 0.40
    SCORING_STREAK_THRESHOLD: float = 0.65
    SCORING_STREAK_BONUS_PER_DAY: float = 0.01
    SCORING_MAX_STREAK_BONUS: float = 0.10
    SCORING_PHONE_T1_MIN: float = 61.0
    SCORING_PHONE_T2_MIN: float = 181.0
    SCORING_PHONE_T3_MIN: float = 301.0
    SCORING_PHONE_T1_PENALTY: float = 0.03
    SCORING_PHONE_T2_PENALTY: float = 0.07
    SCORING_PHONE_T3_PENALTY: float = 0.12

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def scoring_defaults(self) -> dict[str, float]:
        """SCORING_* fields keyed by their ScoringConfig attribute name."""
        prefix = "SCORING_"
        return {
            name[len(prefix):].lower(): getattr(self, name)
            for name in type(self).model_fields
            if name.startswith(prefix)
        }


settings = Settings()
