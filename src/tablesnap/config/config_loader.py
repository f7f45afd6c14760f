"""
Configuration loader for the table snapshot tool.

Reads a JSON or YAML config file, applies environment overrides and returns
a resolved SnapshotConfig. The config is built once and passed explicitly to
the snapshot run; nothing here is process-global.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..core.exceptions import ConfigError
from ..core.identifiers import is_valid_table_name
from ..core.models import ConnectionSettings, SnapshotConfig
from ..snapshot.file_names import DEFAULT_MAX_FILE_NAME_LENGTH, MIN_FILE_NAME_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.json")
DEFAULT_DATA_PATH = "data"

HOME_PATTERN = re.compile(r"\$(\{HOME\}|HOME)")

# Environment variable → connection setting
ENV_CONNECTION_OVERRIDES = {
    "TABLESNAP_SQLSERVER_HOST": "host",
    "TABLESNAP_SQLSERVER_PORT": "port",
    "TABLESNAP_SQLSERVER_USER": "user",
    "TABLESNAP_SQLSERVER_PASSWORD": "password",
    "TABLESNAP_SQLSERVER_DATABASE": "database",
    "TABLESNAP_SQLSERVER_DRIVER": "driver",
    "TABLESNAP_SQLSERVER_CONN_STR": "connection_string",
}
ENV_DATA_PATH = "TABLESNAP_DATA_PATH"


def expand_home(path: str, home: Optional[str] = None) -> str:
    """Replace every $HOME or ${HOME} placeholder with the home directory."""
    home_dir = home if home is not None else str(Path.home())
    return HOME_PATTERN.sub(lambda _: home_dir, path)


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Read a config file into a dictionary.

    Files ending in .yaml or .yml are parsed as YAML, everything else as JSON.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    logger.info(f"Loading config from: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Malformed config file {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain an object at the top level")
    return data


def parse_config(
    data: Dict[str, Any],
    environ: Optional[Dict[str, str]] = None,
    home: Optional[str] = None,
) -> SnapshotConfig:
    """
    Build a SnapshotConfig from raw config values.

    Args:
        data: Raw config mapping (as read from the file)
        environ: Environment used for overrides (default: os.environ)
        home: Home directory for $HOME substitution (default: the user's home)

    Returns:
        Resolved SnapshotConfig

    Raises:
        ConfigError: If any value is missing or invalid
    """
    env = os.environ if environ is None else environ

    connection = _parse_connection(data, env)
    tables = _parse_tables(data.get("tables"))

    data_path = env.get(ENV_DATA_PATH) or data.get("dataPath") or DEFAULT_DATA_PATH
    if not isinstance(data_path, str):
        raise ConfigError("dataPath must be a string")

    max_length = data.get("maxFileNameLength", DEFAULT_MAX_FILE_NAME_LENGTH)
    if isinstance(max_length, bool) or not isinstance(max_length, int):
        raise ConfigError("maxFileNameLength must be an integer")
    if max_length < MIN_FILE_NAME_LENGTH:
        raise ConfigError(f"maxFileNameLength must be at least {MIN_FILE_NAME_LENGTH}")

    skip_unchanged = data.get("skipUnchanged", False)
    if not isinstance(skip_unchanged, bool):
        raise ConfigError("skipUnchanged must be true or false")

    return SnapshotConfig(
        tables=tables,
        data_path=Path(expand_home(data_path, home=home)),
        connection=connection,
        max_file_name_length=max_length,
        skip_unchanged=skip_unchanged,
    )


def load_config(
    config_path: Union[str, Path] = DEFAULT_CONFIG_PATH,
    environ: Optional[Dict[str, str]] = None,
    home: Optional[str] = None,
) -> SnapshotConfig:
    """
    Load and resolve the snapshot configuration.

    Args:
        config_path: Path to the JSON or YAML config file
        environ: Environment used for overrides (default: os.environ)
        home: Home directory for $HOME substitution

    Returns:
        Resolved SnapshotConfig

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data = read_config_file(Path(config_path))
    return parse_config(data, environ=environ, home=home)


def _parse_tables(tables: Any) -> List[str]:
    """Validate the ordered table list."""
    if tables is None:
        raise ConfigError("Config must list the tables to snapshot under 'tables'")
    if not isinstance(tables, list) or not tables:
        raise ConfigError("'tables' must be a non-empty list of table names")

    seen = set()
    for name in tables:
        if not is_valid_table_name(name):
            raise ConfigError(f"Invalid table name: {name!r}")
        # Names differing only in case share a directory on case-insensitive filesystems
        if name.casefold() in seen:
            raise ConfigError(f"Table listed more than once: {name}")
        seen.add(name.casefold())
    return list(tables)


def _parse_connection(data: Dict[str, Any], env) -> ConnectionSettings:
    """Build connection settings from config values and environment overrides."""
    defaults = ConnectionSettings()
    values = {
        "host": data.get("host", defaults.host),
        "port": data.get("port", defaults.port),
        "user": data.get("user", defaults.user),
        "password": data.get("password", defaults.password),
        "database": data.get("database", defaults.database),
        "driver": data.get("driver", defaults.driver),
        "connection_string": data.get("connectionString", defaults.connection_string),
        "trust_server_certificate": data.get(
            "trustServerCertificate", defaults.trust_server_certificate
        ),
        "connection_timeout": data.get("connectionTimeout", defaults.connection_timeout),
    }

    for env_name, key in ENV_CONNECTION_OVERRIDES.items():
        value = env.get(env_name)
        if value:
            values[key] = value

    try:
        values["port"] = int(values["port"])
        values["connection_timeout"] = int(values["connection_timeout"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid port or connectionTimeout: {e}") from e

    for key in ("host", "user", "driver"):
        if not isinstance(values[key], str):
            raise ConfigError(f"'{key}' must be a string")
    for key in ("password", "database", "connection_string"):
        if values[key] is not None and not isinstance(values[key], str):
            raise ConfigError(f"'{key}' must be a string")
    if not isinstance(values["trust_server_certificate"], bool):
        raise ConfigError("trustServerCertificate must be true or false")

    return ConnectionSettings(**values)
