"""
Configuration for the checkpoint repository.

Values come from explicit arguments first, then environment variables
(optionally loaded from a .env file), then defaults.
"""
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_REPOSITORY_PATH = "validation-data.json"


class CheckpointConfig(BaseModel):
    """
    Runtime configuration.

    Attributes:
        repository_path: JSON file holding the validation data records
        rules_path: YAML file with rule definitions (None for an empty rule store)
        repository_name: Name used to label logs and metrics
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "json" or "text"
        metrics_port: Port for the Prometheus endpoint (None to disable)
    """

    repository_path: Path = Path(DEFAULT_REPOSITORY_PATH)
    rules_path: Path | None = None
    repository_name: str = Field("default", min_length=1)
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    metrics_port: int | None = Field(None, ge=1, le=65535)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **overrides) -> "CheckpointConfig":
        """
        Build a configuration from the environment.

        Args:
            env_file: Optional .env file loaded before reading variables
                (existing environment variables are not overridden)
            **overrides: Explicit values that win over the environment

        Returns:
            CheckpointConfig instance
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)

        values = {
            "repository_path": os.getenv("CHECKPOINT_REPOSITORY_PATH", DEFAULT_REPOSITORY_PATH),
            "rules_path": os.getenv("CHECKPOINT_RULES_PATH") or None,
            "repository_name": os.getenv("CHECKPOINT_REPOSITORY_NAME", "default"),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "json").lower(),
        }

        metrics_port = os.getenv("METRICS_PORT")
        if metrics_port:
            values["metrics_port"] = int(metrics_port)

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
