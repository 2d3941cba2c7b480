"""Configuration loader for the task board."""

import os
from pathlib import Path
from typing import Optional
import yaml
from pydantic import BaseModel


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False


class DatabaseConfig(BaseModel):
    # "sqlite" persists to `path`, "memory" keeps everything in process
    backend: str = "sqlite"
    path: str = "data/taskboard.db"


class LoggingConfig(BaseModel):
    level: str = "info"


class BoardConfig(BaseModel):
    """Board behaviour settings."""
    # Reject adds/moves naming a list that does not exist
    strict_references: bool = False


class Config(BaseModel):
    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    board: BoardConfig = BoardConfig()


_config: Optional[Config] = None


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from YAML file and environment variables."""
    global _config

    if _config is not None:
        return _config

    # Determine config path
    if config_path is None:
        config_path = os.environ.get("TASKBOARD_CONFIG", "config.yml")

    config_data = {}

    # Load from file if exists
    if Path(config_path).exists():
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}

    config = Config(**config_data)

    # Override with environment variables
    if os.environ.get("TASKBOARD_DB_PATH"):
        config.database.path = os.environ["TASKBOARD_DB_PATH"]

    if os.environ.get("TASKBOARD_DB_BACKEND"):
        config.database.backend = os.environ["TASKBOARD_DB_BACKEND"].lower()

    if os.environ.get("TASKBOARD_LOG_LEVEL"):
        config.logging.level = os.environ["TASKBOARD_LOG_LEVEL"]

    if os.environ.get("TASKBOARD_STRICT_REFERENCES"):
        config.board.strict_references = (
            os.environ["TASKBOARD_STRICT_REFERENCES"].lower() == "true"
        )

    _config = config
    return config


def get_config() -> Config:
    """Get the loaded configuration."""
    global _config
    if _config is None:
        return load_config()
    return _config
