"""
LearnLink Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any

from dotenv import load_dotenv


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class LearnLinkConfig:
    """Configuration for the LearnLink client"""

    # API settings
    api_base_url: str = "http://localhost:5000"
    timeout: float = 30.0

    # Session settings
    session_file: str = "session.json"
    session_poll_interval: float = 2.0

    # History settings
    history_file: str = ".learnlink_history"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "learnlink.log"
    json_logs: bool = False
    verbose: bool = False

    # Display
    notification_preview: int = 5
    avatar_service_url: str = "https://ui-avatars.com/api/"

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".learnlink"))

    def __post_init__(self):
        """Initialize paths and directories"""
        self.resolve_paths()

    def resolve_paths(self) -> None:
        """Anchor relative file names in the config directory"""
        Path(self.config_dir).mkdir(parents=True, exist_ok=True)

        for name in ("session_file", "history_file", "log_file"):
            value = getattr(self, name)
            if value and not os.path.isabs(value):
                setattr(self, name, str(Path(self.config_dir) / value))

        self.api_base_url = self.api_base_url.rstrip("/")

    @property
    def config_file(self) -> str:
        return str(Path(self.config_dir) / "config.json")

    def load_from_file(self, config_path: str) -> None:
        """Load configuration from JSON file"""
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = json.load(f)
                for key, value in data.items():
                    if hasattr(self, key):
                        setattr(self, key, value)

    def save_to_file(self, config_path: Optional[str] = None) -> None:
        """Save configuration to JSON file"""
        path = Path(config_path or self.config_file)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_default(cls, env_file: Optional[str] = None) -> "LearnLinkConfig":
        """Load defaults, then config.json, then .env and the environment"""
        load_dotenv(env_file)

        config_dir = os.environ.get("LEARNLINK_CONFIG_DIR")
        config = cls(config_dir=config_dir) if config_dir else cls()

        config.load_from_file(config.config_file)

        # Override with environment variables
        config._load_from_env()
        config.resolve_paths()

        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        env_mappings = {
            "VITE_API_URL": "api_base_url",  # Same variable the web front-end reads
            "LEARNLINK_API_URL": "api_base_url",
            "LEARNLINK_TIMEOUT": ("timeout", float),
            "LEARNLINK_LOG_LEVEL": "log_level",
            "LEARNLINK_LOG_FILE": "log_file",
            "LEARNLINK_JSON_LOGS": ("json_logs", _as_bool),
            "LEARNLINK_VERBOSE": ("verbose", _as_bool),
            "LEARNLINK_SESSION_POLL": ("session_poll_interval", float),
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    setattr(self, attr, converter(value))
                else:
                    setattr(self, mapping, value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)
