import os
from dataclasses import dataclass

from dotenv import load_dotenv


def load_env_file(env: str) -> None:
    """Load ``.env.<env>`` if present, else the default .env file."""
    env_file = f".env.{env}"
    if os.path.exists(env_file):
        load_dotenv(env_file)
    else:
        # Fall back to the default .env file
        load_dotenv()


# Load the appropriate .env file on module import
load_env_file(os.environ.get("ROWMODEL_ENV", "development").lower())


@dataclass
class Config:
    environment: str
    database_url: str | None
    log_level: str
    connect_timeout: int

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            environment=os.environ.get("ROWMODEL_ENV", "development").lower(),
            database_url=os.environ.get("DATABASE_URL"),
            log_level=os.environ.get("ROWMODEL_LOG_LEVEL", "WARNING").upper(),
            connect_timeout=int(os.environ.get("ROWMODEL_CONNECT_TIMEOUT", "10")),
        )


config = Config.from_env()
