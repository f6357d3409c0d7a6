from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    working_dir: str = "/tmp/datavalidator"
    cleanup_working_dir: bool = True
    file_split_size: int = 10000
    max_parallel_jobs: int = 4
    max_parallel_chunks: int = 4
    default_charset: str = "utf-8"
    max_issue_samples: int = 50

    term_definitions_dir: str | None = None
    schema_dir: str | None = None

    job_storage: str = "memory"
    job_result_storage_dir: str = "/tmp/datavalidator/results"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "datavalidator"
    db_username: str = "datavalidator"
    db_password: str = "secret"
    db_connect_timeout_seconds: float = 10.0
