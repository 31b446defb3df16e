# workforce/core/config.py
from pydantic_settings import BaseSettings; from dotenv import load_dotenv
load_dotenv()
class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./workforce.db"
    JWT_SECRET_KEY: str = "change-me"; JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 8
    AUTH_COOKIE_NAME: str = "token"; AUTH_COOKIE_SECURE: bool = False
    SEED_DEMO_DATA: bool = True
    LOG_LEVEL: str = "INFO"
settings = Settings()
