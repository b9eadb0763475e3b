#!/usr/bin/env python3
"""
fleetconsole Server Configuration Management

Policy (explicit paths in config):
- PROD (test_mode: false)
    Admin token: <auth_dir>/admin_token  (must exist; else startup fails)
- DEV  (test_mode: true)
    Admin token: <auth_dir>/admin_token  (if missing, fall back to the dev token and log)
"""

import os
import logging
from pathlib import Path
from typing import Optional, Tuple

import yaml
from pydantic import BaseModel, model_validator

logger = logging.getLogger("fleetconsole.server")

DEV_ADMIN_TOKEN = "dev_admin_token_12345"
CONFIG_ENV_VAR = "FLEETCONSOLE_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    # File paths - explicit configuration
    auth_dir: str = "./auth"
    db_path: str = "./fleetconsole.db"
    # Behavior controls
    test_mode: bool = False          # Only controls admin token fallback
    use_tls: bool = False            # Controls HTTPS on/off
    # Retention
    metrics_days: int = 7
    audit_days: int = 30
    # Background tasks (seconds, 0 disables)
    sampler_interval: int = 60
    cleanup_interval: int = 3600
    # Mock terminal
    console_delay_min: float = 0.5
    console_delay_max: float = 1.5
    console_session_ttl: int = 3600

    @model_validator(mode="after")
    def check_console_delay(self) -> "ServerConfig":
        if self.console_delay_min < 0 or self.console_delay_max < self.console_delay_min:
            raise ValueError("console_delay_max must be >= console_delay_min >= 0")
        return self


def load_config_from(path: Optional[str] = None) -> ServerConfig:
    """
    Load server configuration from YAML file.

    Priority: explicit path, then $FLEETCONSOLE_CONFIG, then ./config.yaml.
    A missing file falls back to defaults so a bare checkout starts in place.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    if not Path(path).exists():
        logger.info("Using default configuration")
        return ServerConfig()
    logger.info(f"Loading configuration from: {path}")
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    return ServerConfig(**data)


def resolve_paths(cfg: ServerConfig) -> Tuple[Path, Path, bool, Path, Path]:
    """
    Return (db_path, admin_token_path, allow_dev_admin_token, cert_path, key_path)
    based on explicit config paths.
    """
    auth_dir = Path(cfg.auth_dir)

    return (
        Path(cfg.db_path),
        auth_dir / "admin_token",
        cfg.test_mode,
        auth_dir / "server.crt",
        auth_dir / "server.key",
    )


def read_admin_token(path: Path) -> Optional[str]:
    """Read admin token from file, return None if not readable."""
    try:
        with open(path, "r") as f:
            tok = f.read().strip()
            return tok or None
    except OSError as e:
        logger.debug("admin token file not readable (%s): %s", path, e)
        return None


def resolve_admin_token(cfg: ServerConfig) -> str:
    """Admin token from disk, or the dev token in test mode."""
    _, token_path, allow_dev, _, _ = resolve_paths(cfg)
    token = read_admin_token(token_path)
    if token:
        return token
    if allow_dev:
        logger.warning("admin token not found at %s; test mode, using dev token", token_path)
        return DEV_ADMIN_TOKEN
    raise RuntimeError(f"admin token file missing or empty: {token_path}")
