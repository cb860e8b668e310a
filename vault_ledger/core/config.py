# vault_ledger/core/config.py

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import msgspec
import yaml
from dotenv import load_dotenv

from ..types.configs.config import LedgerConfig
from ..types.model.errors import ConfigurationError


DEFAULT_DATABASE_URL = "sqlite:///vault_ledger.db"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "LEDGER_DB_URL": ("database", "url"),
    "LEDGER_RPC_URL": ("rpc", "endpoint_url"),
    "LEDGER_LOG_LEVEL": ("logging", "level"),
}


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            if config_path.suffix.lower() in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif config_path.suffix.lower() == '.json':
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file type: {config_path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to parse config file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping at the top level")
    return data


def _apply_env_overrides(data: Dict[str, Any]) -> None:
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if not value:
            continue
        current = data.get(section)
        if not isinstance(current, dict):
            current = {}
            data[section] = current
        current[key] = value


def load_config(config_path: Optional[Union[str, Path]] = None,
                env_file: Optional[Union[str, Path]] = None) -> LedgerConfig:
    """
    Build the ledger configuration.

    Order of precedence: LEDGER_* environment variables (including those
    from a .env file), then the YAML/JSON config file, then defaults.
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    data = _read_config_file(Path(config_path)) if config_path else {}
    _apply_env_overrides(data)
    data.setdefault("database", {"url": DEFAULT_DATABASE_URL})

    try:
        config = msgspec.convert(data, LedgerConfig)
    except msgspec.ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    for token in config.tokens:
        try:
            token.validate()
        except ValueError as e:
            raise ConfigurationError(f"Invalid token metadata for {token.address}: {e}") from e

    return config
