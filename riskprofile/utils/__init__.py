# --- shared helpers: environment, logging, config lookup ---------------------
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging
import logging.config
import os

import yaml
from dotenv import dotenv_values

from ..errors import ConfigError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Environment variables read by the package (all optional, .env supported)
ENV_CONFIG_DIR = "RISKPROFILE_CONFIG_DIR"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_DEBUG = "RISKPROFILE_DEBUG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "catalog": {
        "questions_file": "questions.yaml",
        "allocations_file": "allocations.yaml",
    },
    "scoring": {
        "capacity_slack": 0.5,
        "band_floors": [1.8, 2.6, 3.4, 4.2],
        "gap_threshold": 1.0,
        "bias_flag_threshold": 4,
    },
}

_env_loaded = False


def load_env_once(dotenv_path: str | Path = ".env") -> None:
    """Copy RISKPROFILE_* / LOG_LEVEL entries from .env into os.environ; real env vars win."""
    global _env_loaded
    if _env_loaded:
        return
    _env_loaded = True
    if not Path(dotenv_path).exists():
        return
    wanted = {ENV_CONFIG_DIR, ENV_LOG_LEVEL, ENV_DEBUG}
    for k, v in dotenv_values(dotenv_path).items():
        if k in wanted and v is not None and k not in os.environ:
            os.environ[k] = v


def env_setting(name: str, default: str = "") -> str:
    load_env_once()
    return os.getenv(name, default).strip()


def env_flag(name: str) -> bool:
    """True when the variable is 1/true/yes/on."""
    return env_setting(name).lower() in {"1", "true", "yes", "on"}


# Small logger so modules can do: from riskprofile.utils import get_logger
def get_logger(name: str = "riskprofile"):
    lvl = env_setting(ENV_LOG_LEVEL, "INFO").upper()
    logger = logging.getLogger(name)
    if not logger.handlers:
        logging.basicConfig(level=getattr(logging, lvl, logging.INFO), format=LOG_FORMAT)
    return logger


def load_logger(config_path: str | Path | None = None):
    """Apply logging_config.yaml via dictConfig when present, else basicConfig."""
    cfg = Path(config_path) if config_path else find_config_file("logging_config.yaml")
    if cfg is not None and cfg.exists():
        with open(cfg, "r") as f:
            logging.config.dictConfig(yaml.safe_load(f))
        return logging.getLogger("riskprofile")
    return get_logger()


def _find_project_root() -> Path:
    # start at this file and walk up looking for a 'config' directory
    here = Path(__file__).resolve()
    for parent in [here.parent] + list(here.parents):
        if (parent / "config" / "config.yaml").exists():
            return parent
    # fallback: assume two levels up (project root)
    return here.parents[2]


def config_dirs() -> List[Path]:
    """Directories searched for config files, highest priority first."""
    dirs: List[Path] = []
    override = env_setting(ENV_CONFIG_DIR)
    if override:
        dirs.append(Path(override).expanduser())
    dirs.append(_find_project_root() / "config")
    dirs.append(Path("config"))
    return dirs


def find_config_file(name: str) -> Optional[Path]:
    """Return the first existing config/<name>, or None."""
    for d in config_dirs():
        p = d / name
        if p.exists():
            return p
    return None


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load config.yaml, backfilling any missing keys with DEFAULT_CONFIG.

    An explicit `path` must exist. Without one, a missing config.yaml means
    built-in defaults.

    Raises:
        FileNotFoundError: explicit path does not exist
        ConfigError: file is not valid YAML or not a mapping
    """
    if path is not None:
        cfg_path: Optional[Path] = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
    else:
        cfg_path = find_config_file("config.yaml")

    cfg: Dict[str, Any] = {}
    if cfg_path is not None:
        try:
            with open(cfg_path, "r") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{cfg_path}: invalid YAML") from e
        if not isinstance(cfg, dict):
            raise ConfigError(f"{cfg_path}: top level must be a mapping")
    for section, defaults in DEFAULT_CONFIG.items():
        cfg.setdefault(section, {})
        for k, v in defaults.items():
            cfg[section].setdefault(k, v)
    return cfg


__all__ = [
    "ENV_CONFIG_DIR",
    "ENV_LOG_LEVEL",
    "ENV_DEBUG",
    "load_env_once",
    "env_setting",
    "env_flag",
    "get_logger",
    "load_logger",
    "config_dirs",
    "find_config_file",
    "load_config",
    "DEFAULT_CONFIG",
]
# -----------------------------------------------------------------------------
