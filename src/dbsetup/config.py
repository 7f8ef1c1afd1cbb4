from typing import List
from pathlib import Path
import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import ValidationError, field_validator
from .exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_CONFIG_PATH = Path.home() / ".dbsetup" / "connection.yaml"

class WizardSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DBSETUP_", extra="ignore")

    store_name: str = "Supabase"
    request_timeout_s: float = 30.0

    # Probing
    connectivity_resource: str = "_test_connection"
    schema_projection: str = "id"
    max_workers: int = 4

    # Error text classification (case-insensitive substrings)
    absent_patterns: List[str] = ["does not exist"]
    permission_patterns: List[str] = ["permission denied"]
    unreachable_patterns: List[str] = [
        "connection refused",
        "could not connect",
        "could not translate host name",
        "name or service not known",
        "failed to fetch",
        "network is unreachable",
        "timed out",
        "ssl",
    ]
    # Fold unclassified schema errors into "present", as older releases did
    lenient_classification: bool = False

    # Persistence and navigation
    config_path: Path = DEFAULT_CONFIG_PATH
    redirect_target: str = "/"
    redirect_delay_s: float = 1.0

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_yaml(cls, config_path: Path) -> "WizardSettings":
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
            if not isinstance(raw_config, dict):
                raise ConfigurationError(f"Invalid configuration format: expected a mapping in {config_path}")
            return cls(**raw_config)
        except (ValidationError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}")
