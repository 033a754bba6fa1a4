from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
import os

class Settings(BaseSettings):
    """Application settings loaded from .env.portal (or custom env file)"""

    # Allow overriding env_file via PORTAL_ENV_FILE environment variable
    model_config = SettingsConfigDict(  # type: ignore[misc]
        env_file=os.environ.get('PORTAL_ENV_FILE', '.env.portal'),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Directory
    DEFAULT_DEPARTMENT: str = "General"  # Injected when an account has no departments

    # Limits
    MAX_PROJECT_DEPARTMENTS: int = 8
    MAX_INSTRUCTION_DOCUMENTS: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_CATEGORIES: str = ""

    @property
    def default_department(self) -> str:
        return self.DEFAULT_DEPARTMENT.strip() or "General"

    @property
    def max_project_departments(self) -> int:
        return self.MAX_PROJECT_DEPARTMENTS

    @property
    def max_instruction_documents(self) -> int:
        return self.MAX_INSTRUCTION_DOCUMENTS

    @property
    def log_level(self) -> str:
        return self.LOG_LEVEL.upper()

    @property
    def log_categories(self) -> list[str]:
        if not self.LOG_CATEGORIES:
            return []
        return [cat.strip() for cat in self.LOG_CATEGORIES.split(',')]

@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
