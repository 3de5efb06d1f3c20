from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Each store URL is either mongodb://host:port/dbname or memory://
    database_url: str
    session_database_url: str
    log_database_url: str
    host: str = "127.0.0.1"
    port: int = 3690
    debug: bool = False
    cors_origins: list[str] = []
    session_time: int = 60  # Sliding session window in seconds
    log_limit: int = 100  # Default number of entries returned by /get_logs

    model_config = {
        "env_file": [".env"],
        "env_prefix": "EZBASE_",
        "extra": "ignore",
    }
