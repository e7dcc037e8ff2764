"""Configuration management for the chadoxml tools."""

import codecs
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class Config:
    """Configuration shared by the stripper and the extractor."""

    encoding: str = "utf-8"
    log_dir: Optional[Path] = None
    verbose: bool = False
    debug: bool = False
    strict: bool = False  # raise on an element still open at end of stream

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Config":
        """Load configuration from environment variables, reading a .env file first."""
        if env_path and env_path.exists():
            load_dotenv(env_path)
        else:
            load_dotenv()

        log_dir = os.getenv("CHADOCLEAN_LOG_DIR", "")

        return cls(
            encoding=os.getenv("CHADOCLEAN_ENCODING", "utf-8"),
            log_dir=Path(log_dir) if log_dir else None,
            verbose=_env_flag("CHADOCLEAN_VERBOSE"),
            debug=_env_flag("CHADOCLEAN_DEBUG"),
            strict=_env_flag("CHADOCLEAN_STRICT"),
        )

    def validate(self) -> bool:
        """Validate the configuration."""
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {self.encoding}")
        return True
