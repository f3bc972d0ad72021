import os
from pydantic_settings import BaseSettings


def get_default_database_url() -> str:
    """Get default database URL based on environment."""
    if os.environ.get("DATABASE_URL"):
        return os.environ.get("DATABASE_URL")
    # Serverless hosts only allow writes under /tmp
    if os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"):
        return "sqlite:////tmp/zoocare.db"
    return "sqlite:///./zoocare.db"


class Settings(BaseSettings):
    APP_NAME: str = "ZooCare Records API"
    DATABASE_URL: str = get_default_database_url()
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Medical file uploads
    UPLOAD_DIR: str = "uploads/medical"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    MAX_UPLOAD_FILES: int = 10

    # Diet health score weights (placeholder formula, see HealthScoreWeights)
    HEALTH_WEIGHT_PROTEIN: float = 1.0
    HEALTH_WEIGHT_FAT: float = 1.0
    HEALTH_WEIGHT_FIBER: float = 1.0
    HEALTH_WEIGHT_CALCIUM: float = 0.1
    HEALTH_WEIGHT_CALORIES: float = 0.5

    class Config:
        env_file = ".env"


settings = Settings()
