"""
name-maker configuration

All magic numbers, timeouts, model choices and storage paths live here.
Environment variables override defaults for deployment flexibility.

The persisted user config (API key) lives in ~/.name-maker/config.json and
is read and written by the helpers at the bottom of this module.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

logger = logging.getLogger(__name__)


@dataclass
class TimeoutConfig:
    """Bounded waits for every external call"""
    dns_seconds: float = float(os.getenv("NAME_MAKER_DNS_TIMEOUT", "5.0"))
    http_seconds: float = float(os.getenv("NAME_MAKER_HTTP_TIMEOUT", "10.0"))
    browser_default_ms: int = int(os.getenv("NAME_MAKER_BROWSER_TIMEOUT_MS", "20000"))
    browser_search_input_ms: int = 10000
    browser_results_ms: int = 15000
    browser_filter_ms: int = 8000


@dataclass
class DomainConfig:
    """Which domains get resolved per name"""
    max_tlds: int = int(os.getenv("NAME_MAKER_MAX_TLDS", "12"))
    max_hacks: int = 2


@dataclass
class StoreConfig:
    """App store search behavior"""
    result_limit: int = 10
    country: str = os.getenv("NAME_MAKER_STORE_COUNTRY", "us")
    play_backend: Literal["scrape", "library"] = os.getenv("PLAY_STORE_BACKEND", "scrape")
    user_agent: str = "NameMaker/1.0"
    browser_user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class TrademarkConfig:
    """Trademark portal automation"""
    search_url: str = "https://tmsearch.uspto.gov/search/search-information"
    results_url: str = "https://tmsearch.uspto.gov/search/search-results"
    headless: bool = os.getenv("NAME_MAKER_HEADLESS", "true").lower() == "true"
    max_records: int = 10
    pre_navigation_min_seconds: float = 0.3
    pre_navigation_jitter_seconds: float = 0.5
    stabilize_seconds: float = 0.5
    filter_settle_seconds: float = 0.3
    typing_delay_ms: int = 20


@dataclass
class ModelConfig:
    """AI model selection"""
    provider: Literal["claude", "mock"] = os.getenv("NAME_MAKER_PROVIDER", "claude")
    model: str = os.getenv("NAME_MAKER_MODEL", "claude-sonnet-4-20250514")
    max_tokens: int = 2048
    validation_model: str = os.getenv("NAME_MAKER_VALIDATION_MODEL", "claude-3-5-haiku-20241022")


@dataclass
class StorageConfig:
    """Where config and sessions live on disk"""
    home_dir: Path = Path(os.getenv("NAME_MAKER_HOME", str(Path.home() / ".name-maker")))
    max_listed_sessions: int = 10

    @property
    def config_file(self) -> Path:
        return self.home_dir / "config.json"

    @property
    def sessions_dir(self) -> Path:
        return self.home_dir / "sessions"


@dataclass
class AuthConfig:
    """Browser-based API key capture"""
    timeout_seconds: float = float(os.getenv("NAME_MAKER_AUTH_TIMEOUT", "300"))
    console_url: str = "https://console.anthropic.com/settings/keys"
    key_prefix: str = "sk-ant-"


@dataclass
class Config:
    """Master config, import this"""
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    domains: DomainConfig = field(default_factory=DomainConfig)
    stores: StoreConfig = field(default_factory=StoreConfig)
    trademark: TrademarkConfig = field(default_factory=TrademarkConfig)
    models: ModelConfig = field(default_factory=ModelConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)

    @classmethod
    def fast_mode(cls) -> "Config":
        """For development and testing: no pacing delays, short waits"""
        cfg = cls()
        cfg.timeouts.dns_seconds = 1.0
        cfg.timeouts.http_seconds = 2.0
        cfg.trademark.pre_navigation_min_seconds = 0.0
        cfg.trademark.pre_navigation_jitter_seconds = 0.0
        cfg.trademark.stabilize_seconds = 0.0
        cfg.trademark.filter_settle_seconds = 0.0
        return cfg


# Singleton
config = Config()


# =============================================================================
# PERSISTED USER CONFIG
# =============================================================================

def load_user_config(path: Optional[Path] = None) -> dict:
    """
    Read the user config file.

    A missing or unreadable file yields an empty dict so a corrupt file
    never stops the program.
    """
    path = path or config.storage.config_file
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: expected an object")
        return {}
    return data


def save_user_config(data: dict, path: Optional[Path] = None) -> None:
    """Write the user config file, creating its directory."""
    path = path or config.storage.config_file
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def get_api_key(path: Optional[Path] = None) -> Optional[str]:
    """API key from ANTHROPIC_API_KEY, falling back to the config file."""
    env_key = os.getenv("ANTHROPIC_API_KEY")
    if env_key:
        return env_key
    return load_user_config(path).get("anthropic_api_key") or None


def save_api_key(api_key: str, path: Optional[Path] = None) -> None:
    """Persist the API key, keeping any other settings in the file."""
    data = load_user_config(path)
    data["anthropic_api_key"] = api_key
    save_user_config(data, path)
