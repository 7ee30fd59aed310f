"""
Node endpoint configuration.

Resolves the JSON-RPC endpoint URL from, in order:
1. an explicit config file path (must exist)
2. the ETH_NODE_URL environment variable (~/.ethrpc/.env is loaded first)
3. the config file named by ETHRPC_CONFIG
4. ./config.json
5. ~/.ethrpc/config.json

Config files are JSON objects with a required "nodeUrl" and an optional
"timeout" in seconds. The first config file found is authoritative.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import jsonschema
from dotenv import load_dotenv

from .errors import ConfigError
from .transport import DEFAULT_TIMEOUT


# Default config directory
ETHRPC_DIR = Path.home() / ".ethrpc"
ETHRPC_ENV = ETHRPC_DIR / ".env"
CONFIG_FILENAME = "config.json"

NODE_URL_ENV = "ETH_NODE_URL"
CONFIG_PATH_ENV = "ETHRPC_CONFIG"

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["nodeUrl"],
    "properties": {
        "nodeUrl": {"type": "string", "pattern": "^https?://.+"},
        "timeout": {"type": "number", "exclusiveMinimum": 0},
    },
}


@dataclass(frozen=True)
class NodeConfig:
    node_url: str
    timeout: float = DEFAULT_TIMEOUT
    source: str = "<default>"


def config_search_paths(cwd: Optional[Path] = None) -> list[Path]:
    """Config file candidates, highest priority first (excluding explicit paths)."""
    paths = []
    named = os.environ.get(CONFIG_PATH_ENV)
    if named:
        paths.append(Path(named).expanduser())
    paths.append((cwd or Path.cwd()) / CONFIG_FILENAME)
    paths.append(ETHRPC_DIR / CONFIG_FILENAME)
    return paths


def load_config_file(path: Path) -> NodeConfig:
    """
    Load and validate one config file.

    Raises:
        ConfigError: If the file is unreadable, not JSON, or fails the schema
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as exc:
        raise ConfigError(f"Could not open config file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc

    validator = jsonschema.Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.path) or "<root>"
        if first.validator == "required":
            raise ConfigError(f"nodeUrl not found in config file {path}")
        raise ConfigError(f"Invalid config file {path}: {location}: {first.message}")

    return NodeConfig(
        node_url=payload["nodeUrl"],
        timeout=float(payload.get("timeout", DEFAULT_TIMEOUT)),
        source=str(path),
    )


def load_node_config(
    config_path: Optional[Path] = None,
    env_path: Optional[Path] = None,
) -> NodeConfig:
    """
    Resolve the node configuration.

    Args:
        config_path: Explicit config file; skips the search when given
        env_path: .env file to load (default: ~/.ethrpc/.env)

    Returns:
        Resolved NodeConfig

    Raises:
        ConfigError: If no endpoint can be found
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Could not open config file {config_path}")
        return load_config_file(config_path)

    env_path = env_path or ETHRPC_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    node_url = os.environ.get(NODE_URL_ENV)
    if node_url:
        return NodeConfig(node_url=node_url, source=NODE_URL_ENV)

    for candidate in config_search_paths():
        if candidate.is_file():
            return load_config_file(candidate)

    raise ConfigError(
        f"No node URL configured. Set {NODE_URL_ENV} or create "
        f"{CONFIG_FILENAME} with a \"nodeUrl\" entry."
    )


def resolve_node_url(
    config_path: Optional[Path] = None,
    env_path: Optional[Path] = None,
) -> str:
    return load_node_config(config_path=config_path, env_path=env_path).node_url


__all__ = [
    "ETHRPC_DIR",
    "ETHRPC_ENV",
    "CONFIG_FILENAME",
    "NODE_URL_ENV",
    "CONFIG_PATH_ENV",
    "CONFIG_SCHEMA",
    "NodeConfig",
    "config_search_paths",
    "load_config_file",
    "load_node_config",
    "resolve_node_url",
]
