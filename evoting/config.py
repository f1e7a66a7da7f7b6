# evoting/config.py
# Central place for settings and constants
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

# Minimum ages enforced on registration and candidate creation
MIN_VOTER_AGE = 18
MIN_CANDIDATE_AGE = 25

# 12 or 13 digits, optionally grouped as xxxxx-xxxxxx(x)-x
NATIONAL_ID_PATTERN = r"^\d{5}-?\d{6,7}-?\d$"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "voting_db"
    mongo_max_pool_size: int = 10
    mongo_server_selection_timeout_ms: int = 5000
    mongo_socket_timeout_ms: int = 45000

    # --- Security & JWT Config ---
    secret_key: str = "a_very_secret_key_for_dev_only"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    log_level: str = "INFO"
    port: int = 5000


def load_settings() -> Settings:
    """Build the immutable settings object from the environment (.env aware)."""
    defaults = Settings()
    origins = os.getenv("CORS_ORIGINS")
    return Settings(
        mongo_uri=os.getenv("MONGO_URI", defaults.mongo_uri),
        mongo_db=os.getenv("MONGO_DB", defaults.mongo_db),
        mongo_max_pool_size=int(os.getenv("MONGO_MAX_POOL_SIZE", defaults.mongo_max_pool_size)),
        mongo_server_selection_timeout_ms=int(
            os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", defaults.mongo_server_selection_timeout_ms)
        ),
        mongo_socket_timeout_ms=int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", defaults.mongo_socket_timeout_ms)),
        secret_key=os.getenv("SECRET_KEY", defaults.secret_key),
        algorithm=os.getenv("JWT_ALGORITHM", defaults.algorithm),
        access_token_expire_minutes=int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", defaults.access_token_expire_minutes)
        ),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else defaults.cors_origins,
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
        port=int(os.getenv("PORT", defaults.port)),
    )
