from __future__ import annotations
import logging, os
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from pydantic import BaseModel

CHECKED_ENV = "RLEIMAGE_CHECKED"
_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime switches; `checked` makes cursors raise on boundary misuse."""
    checked: bool = False
    log_level: str = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None


# built from the environment on first use
_settings: Optional[Settings] = None


def load_yaml_config(config_path: Path) -> Dict[str, Any]:
    with Path(config_path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Settings from an optional YAML file; RLEIMAGE_CHECKED overrides `checked`."""
    data: Dict[str, Any] = {}
    if config_path is not None:
        data.update(load_yaml_config(config_path))
    env = os.environ.get(CHECKED_ENV)
    if env is not None:
        data["checked"] = env.strip().lower() in _TRUTHY
    return Settings(**data)


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def use_settings(settings: Optional[Settings]) -> Optional[Settings]:
    """Install `settings` as the process default (None re-reads the environment); returns the previous one."""
    global _settings
    previous, _settings = _settings, settings
    return previous


def reset_settings() -> None:
    use_settings(None)


def set_checked(flag: bool) -> None:
    use_settings(get_settings().model_copy(update={"checked": bool(flag)}))


def configure_logging(debug: bool = False, settings: Optional[Settings] = None) -> None:
    """basicConfig from settings (current ones by default); `debug` forces DEBUG."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    if debug:
        level = logging.DEBUG
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(level=level, format=settings.log_format, handlers=handlers, force=True)
