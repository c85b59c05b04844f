from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # App Basics
    app_env: str = "dev"
    app_name: str = "SEN'Diabete"
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # Logging
    log_level: str = "info"
    log_format: str = "console"  # "console" or "json"

    # Database
    database_url: str = "sqlite:///./sendiabete.db"
    db_echo: bool = False

    # JWT
    jwt_secret: str = "secret_key"
    jwt_alg: str = "HS256"
    jwt_access_ttl_min: int = 60

    # Secret hashing
    bcrypt_rounds: int = 12

    # Vision analysis (OpenAI compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    vision_model: str = "gpt-4o-mini"
    vision_timeout_seconds: float = 20.0
    # Degraded mode: when the vision call fails, answer with a fixed reading
    vision_fallback_enabled: bool = True
    vision_fallback_value: str = "1.20"

    # License plans, JSON file shaped like {plan_id: {name, photos, duration_days, price, currency}}
    # Empty -> built-in plans
    license_catalog_path: str = ""

    # Admin bootstrap (scripts/seed_admin.py)
    admin_account_id: str = "admin"
    admin_email: str = "admin@sendiabete.sn"
    admin_name: str = "Administrateur"

    # Tell pydantic to read from .env file
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.app_env in ("prod", "production")

settings = Settings()
