import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Load .env file from the project directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Also try loading from current directory
load_dotenv()


class Settings(BaseSettings):
    database_url: str = "sqlite:///./linklens.db"
    stage_delay_seconds: float = 0.8
    history_limit: int = 100
    min_password_length: int = 6
    default_scheme: str = "https"
    random_seed: int | None = None
    report_dir: str = "reports"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()

if settings.random_seed is not None:
    logger.info("Analysis engine random source seeded with %s", settings.random_seed)
else:
    logger.debug("Analysis engine random source is unseeded")
