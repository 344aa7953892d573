from typing import Any, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_PORT = 5000
DEFAULT_SALT_ROUNDS = 10
# bcrypt only accepts work factors in this range
MIN_SALT_ROUNDS = 4
MAX_SALT_ROUNDS = 31


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class Settings(BaseSettings):

    # Application
    APP_NAME: str = "User API"
    APP_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = DEFAULT_PORT
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Database (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017/usermgmt"
    MONGODB_DB_NAME: Optional[str] = None
    MONGODB_TIMEOUT_MS: int = 5000

    # Security
    SALT_ROUNDS: int = DEFAULT_SALT_ROUNDS

    @field_validator("PORT", mode="before")
    @classmethod
    def _parse_port(cls, value: Any) -> int:
        port = _as_int(value)
        if port is None or port <= 0:
            return DEFAULT_PORT
        return port

    @field_validator("SALT_ROUNDS", mode="before")
    @classmethod
    def _parse_salt_rounds(cls, value: Any) -> int:
        rounds = _as_int(value)
        if rounds is None or rounds <= 0:
            return DEFAULT_SALT_ROUNDS
        return max(MIN_SALT_ROUNDS, min(MAX_SALT_ROUNDS, rounds))

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
