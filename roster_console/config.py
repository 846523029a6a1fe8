"""Console configuration.

Values come from the environment (prefix ``ROSTER_``) or a ``.env`` file.
"""

import uuid
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    api_url: str = Field(default="http://localhost:8000", description="Student REST API base URL")
    secret_key: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Flask session signing key")
    port: int = 8080
    log_level: str = "INFO"
    default_landing: str = "/dashboard"

    model_config = {
        "env_prefix": "ROSTER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
