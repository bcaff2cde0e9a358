"""
clouds.yaml loading.

Finds and parses clouds.yaml files and returns validated cloud entries.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .constants import CLOUDS_YAML, DEFAULT_CONFIG_SEARCH_PATHS, ENV_CLIENT_CONFIG_FILE
from .schema import CloudConfig, validate_cloud_config
from ..exceptions import ConfigError
from ..logger import get_logger, sanitize_dict

logger = get_logger('core.config')

PathLike = Union[str, Path]


def find_config(
    filename: str = CLOUDS_YAML,
    search_paths: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Locate a configuration file.

    OS_CLIENT_CONFIG_FILE takes precedence over the search paths.

    Args:
        filename: File name to look for in each search path
        search_paths: Directories to search (defaults to DEFAULT_CONFIG_SEARCH_PATHS)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Path to the first existing file, or None
    """
    environ = os.environ if environ is None else environ

    explicit = environ.get(ENV_CLIENT_CONFIG_FILE)
    if explicit:
        path = Path(explicit).expanduser()
        if path.is_file():
            logger.debug(f"Using {ENV_CLIENT_CONFIG_FILE}: {path}")
            return path
        logger.warning(f"{ENV_CLIENT_CONFIG_FILE} points to a missing file: {path}")

    for directory in search_paths or DEFAULT_CONFIG_SEARCH_PATHS:
        candidate = Path(directory).expanduser() / filename
        if candidate.is_file():
            logger.debug(f"Found {filename} at {candidate}")
            return candidate

    return None


def load_yaml(path: PathLike) -> Dict[str, Any]:
    """
    Load a YAML mapping from disk.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping
    """
    path = Path(path).expanduser()
    logger.debug(f"Reading file: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        error_msg = f"File not found: {path}"
        logger.error(error_msg)
        raise ConfigError(error_msg) from e
    except yaml.YAMLError as e:
        error_msg = f"Invalid YAML in file {path}: {e}"
        logger.error(error_msg)
        raise ConfigError(error_msg) from e
    except OSError as e:
        error_msg = f"Failed to read file {path}: {e}"
        logger.error(error_msg)
        raise ConfigError(error_msg) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")

    return data


def load_cloud_config(
    cloud: str,
    config_path: Optional[PathLike] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CloudConfig:
    """
    Load one named cloud from clouds.yaml.

    Args:
        cloud: Name of the cloud under the ``clouds`` key
        config_path: Explicit clouds.yaml path. If None, searches default paths.
        environ: Environment mapping used for OS_CLIENT_CONFIG_FILE lookup

    Returns:
        Validated CloudConfig

    Raises:
        ConfigError: If no file is found, the cloud is absent or invalid
    """
    if config_path is None:
        found = find_config(environ=environ)
        if found is None:
            error_msg = (
                f"{CLOUDS_YAML} not found in any default path: {DEFAULT_CONFIG_SEARCH_PATHS}. "
                f"Set {ENV_CLIENT_CONFIG_FILE} or pass an explicit config path."
            )
            logger.error(error_msg)
            raise ConfigError(error_msg)
        config_path = found

    logger.info(f"Loading cloud '{cloud}' from: {config_path}")
    data = load_yaml(config_path)

    clouds = data.get('clouds')
    if not isinstance(clouds, dict):
        raise ConfigError(f"No 'clouds' section in {config_path}")

    if cloud not in clouds:
        error_msg = (
            f"Cloud '{cloud}' not found in {config_path}. "
            f"Available clouds: {sorted(clouds)}"
        )
        logger.error(error_msg)
        raise ConfigError(error_msg)

    entry = clouds[cloud]
    if isinstance(entry, dict):
        logger.debug(f"Cloud entry: {sanitize_dict(entry)}")
    return validate_cloud_config(entry, cloud)


def load_cloud_file(path: PathLike) -> CloudConfig:
    """
    Load a YAML file holding a single cloud.

    The file is either a bare cloud entry or a clouds.yaml with exactly one
    cloud under ``clouds``.

    Raises:
        ConfigError: If the file is missing, ambiguous or the entry is invalid
    """
    logger.info(f"Loading cloud entry from: {path}")
    data = load_yaml(path)

    clouds = data.get('clouds')
    if clouds is None:
        return validate_cloud_config(data, str(path))

    if not isinstance(clouds, dict) or len(clouds) != 1:
        count = len(clouds) if isinstance(clouds, dict) else 0
        raise ConfigError(
            f"{path} defines {count} clouds; pass a cloud name to select one"
        )

    (name, entry), = clouds.items()
    return validate_cloud_config(entry, name)
