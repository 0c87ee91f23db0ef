"""Application settings with environment validation."""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings with environment validation."""

    def __init__(self) -> None:
        self.environment = os.getenv("ENV", "development")
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "text")

        # Security
        self.cors_origins = self._parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))

        # Storage
        self.storage_backend = os.getenv("STORAGE_BACKEND", "memory").lower()
        self.database_url = os.getenv("DATABASE_URL", "sqlite://")
        self.sql_debug = self._parse_bool(os.getenv("SQL_DEBUG", "false"))

        # Demo owner: every request is scoped to this account
        self.demo_username = os.getenv("DEMO_USERNAME", "jane.smith")
        self.demo_password = os.getenv("DEMO_PASSWORD", "password123")
        self.seed_demo_data = self._parse_bool(os.getenv("SEED_DEMO_DATA", "true"))

        # External APIs
        self.llm_provider = os.getenv("LLM_PROVIDER", "openai")
        self.llm_model = os.getenv("LLM_MODEL")
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "your_openai_api_key_here")
        self.llm_timeout_seconds = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
        # Extra attempts after the first; 0 means a single call
        self.llm_max_retries = int(os.getenv("LLM_MAX_RETRIES", "0"))

    def _parse_cors_origins(self, v: str) -> List[str]:
        if v == "*":
            return ["*"]
        return [origin.strip() for origin in v.split(",")]

    def _parse_bool(self, v: str) -> bool:
        return v.lower() in ("true", "1", "yes", "on")

    @property
    def is_production(self) -> bool:  # convenience flag
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:  # convenience flag
        return self.environment.lower() == "development"


settings = Settings()
