"""
Configuration management.
"""

from pathlib import Path
from datetime import datetime
from typing import Any, Optional
import json

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

GITHUB_META_URL = "https://api.github.com/meta"
DEFAULT_TIMEOUT = 5.0


def load_config_file() -> dict[str, Any]:
    """
    Load optional config from ~/.reachscope.yaml or ./.reachscope.yaml.
    Returns dict with output_dir (Path), verbose (bool), timeout (float), max_workers (int).
    Missing or malformed keys are omitted so callers can use their own defaults.
    """
    result: dict[str, Any] = {}
    candidates = [
        Path.home() / ".reachscope.yaml",
        Path.cwd() / ".reachscope.yaml",
    ]
    raw: dict[str, Any] = {}
    for path in candidates:
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    raw = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Ignoring unreadable config file {path}: {e}")
                raw = {}
            break
    if not isinstance(raw, dict) or not raw:
        return result
    if "output_dir" in raw:
        result["output_dir"] = Path(raw["output_dir"]).expanduser().resolve()
    if "verbose" in raw:
        result["verbose"] = bool(raw["verbose"])
    if "timeout" in raw:
        try:
            result["timeout"] = float(raw["timeout"])
        except (TypeError, ValueError):
            pass
    if "max_workers" in raw:
        try:
            result["max_workers"] = int(raw["max_workers"])
        except (TypeError, ValueError):
            pass
    return result


class AppConfig(BaseModel):
    """Application configuration."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    output_dir: Path = Field(default=Path("output"))
    verbose: bool = False
    timeout: float = DEFAULT_TIMEOUT
    max_workers: Optional[int] = None  # None: one worker per address
    github_meta_url: str = GITHUB_META_URL

    @field_validator('output_dir', mode='before')
    @classmethod
    def validate_output_dir(cls, v):
        """Validate and convert output_dir to Path."""
        if v is None:
            return Path("output")
        if isinstance(v, str):
            return Path(v)
        if isinstance(v, Path):
            return v
        return Path("output")

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator('max_workers')
    @classmethod
    def validate_max_workers(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    def model_post_init(self, __context):
        """Ensure output directory exists and is resolved to absolute path."""
        self.output_dir = self.output_dir.resolve()
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def create_run_dir(self, run_name: str) -> Path:
        """Create a timestamped directory for a probe run."""
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        run_dir = self.output_dir / f"{timestamp}_{run_name}"
        run_dir.mkdir(parents=True, exist_ok=True)
        return run_dir

    def save_metadata(self, run_dir: Path, metadata: dict):
        """Save run metadata to JSON file."""
        metadata_file = run_dir / "metadata.json"

        metadata["timestamp"] = datetime.now().isoformat()

        with open(metadata_file, "w") as f:
            json.dump(metadata, f, indent=2, default=str)
