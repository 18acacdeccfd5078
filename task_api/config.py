"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Task API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Store backend: cassandra or sql
    STORE_BACKEND: str = "cassandra"

    # Cassandra / ScyllaDB
    CASSANDRA_CONTACT_POINTS: List[str] = ["127.0.0.1"]
    CASSANDRA_PORT: int = 9042
    CASSANDRA_USERNAME: Optional[str] = None
    CASSANDRA_PASSWORD: Optional[str] = None
    CASSANDRA_LOCAL_DC: Optional[str] = None
    CASSANDRA_KEYSPACE: str = "todo_db"
    CASSANDRA_REPLICATION_CLASS: str = "NetworkTopologyStrategy"
    CASSANDRA_REPLICATION_FACTOR: int = 3
    TASKS_TABLE: str = "tasks"

    # SQL backend
    DATABASE_URL: str = "sqlite+aiosqlite:///./tasks.db"
    DATABASE_ECHO: bool = False

    # Pagination
    MAX_PAGE_SIZE: int = 100
    DEFAULT_PAGE_SIZE: int = 10

    # Number of sample tasks inserted at startup
    SEED_SAMPLE_TASKS: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
