"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .lifecycle import CHECK_INTERVAL, HEARTBEAT_TIMEOUT

PACKAGE_DIR = Path(__file__).resolve().parent

load_dotenv()


@dataclass(slots=True)
class Settings:
    host: str
    port: int
    config_path: Path
    static_dir: Path
    open_browser: bool
    log_level: str
    heartbeat_timeout: float = HEARTBEAT_TIMEOUT
    check_interval: float = CHECK_INTERVAL

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


def is_bundled() -> bool:
    """Return ``True`` when running from a frozen application bundle."""

    return bool(getattr(sys, "frozen", False))


def default_config_path() -> Path:
    if is_bundled():
        return Path(sys.executable).resolve().parent / "config.json"
    return Path("config.json")


def default_static_dir() -> Path:
    if is_bundled():
        return Path(sys.executable).resolve().parent / "static"
    return PACKAGE_DIR / "static"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    """Load configuration from environment variables."""

    config_path = os.environ.get("ASAP_NOTES_CONFIG")
    static_dir = os.environ.get("ASAP_NOTES_STATIC_DIR")

    return Settings(
        host=os.environ.get("ASAP_NOTES_HOST", "127.0.0.1"),
        port=int(os.environ.get("ASAP_NOTES_PORT", "8080")),
        config_path=Path(config_path).expanduser() if config_path else default_config_path(),
        static_dir=Path(static_dir).expanduser() if static_dir else default_static_dir(),
        open_browser=_env_flag("ASAP_NOTES_OPEN_BROWSER", True),
        log_level=os.environ.get("LOG_LEVEL", "info").upper(),
        heartbeat_timeout=float(os.environ.get("ASAP_NOTES_HEARTBEAT_TIMEOUT", HEARTBEAT_TIMEOUT)),
        check_interval=float(os.environ.get("ASAP_NOTES_CHECK_INTERVAL", CHECK_INTERVAL)),
    )
