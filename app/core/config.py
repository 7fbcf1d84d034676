from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JWT Settings
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Database
    DATABASE_URL: str

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Ordering
    TAX_RATE: float = 0.18
    CURRENCY: str = "FCFA"
    DEFAULT_RESTAURANT_ID: str = "akounamatata_main"
    ORDER_NUMBER_PREFIX: str = "CMD"
    CART_WRITE_RETRIES: int = 3
    BEST_EFFORT_RETRIES: int = 3

    # QR codes
    QR_BASE_URL: str = "http://localhost:3000/menu/"
    QR_EXPIRY_ENABLED: bool = True
    QR_MAX_AGE_HOURS: int = 24

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
