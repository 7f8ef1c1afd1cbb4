import logging
from pathlib import Path
from typing import Optional
import yaml
from pydantic import ValidationError
from ..domain.models import Credentials
from ..exceptions import StorageError

logger = logging.getLogger(__name__)

class YamlConfigurationStore:
    """
    Persists the validated endpoint and key to a small YAML file
    for later application runs. save() overwrites.
    """
    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def save(self, credentials: Credentials) -> None:
        payload = {"url": credentials.endpoint, "anon_key": credentials.access_key}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                yaml.safe_dump(payload, f, default_flow_style=False)
            self.path.chmod(0o600)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}")
        logger.info("Saved connection configuration to %s", self.path)

    def load(self) -> Optional[Credentials]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r") as f:
                raw = yaml.safe_load(f) or {}
            return Credentials(endpoint=raw["url"], access_key=raw["anon_key"])
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValidationError) as e:
            raise StorageError(f"Invalid saved configuration in {self.path}: {e}")

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove {self.path}: {e}")
