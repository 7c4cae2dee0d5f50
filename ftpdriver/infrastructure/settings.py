#!/usr/bin/env python3
"""Server settings loading for ftpdriver.

Settings are read from a YAML document on every call; nothing is cached.
When the document leaves ``public_host`` empty, the resolver asks an
external address-echo service for the server's public address. A failed
lookup is only a warning: the settings are still returned, with the field
left empty.

Example:
    >>> resolver = SettingsResolver("sample/conf/settings.yaml", logger)
    >>> settings = resolver.get_settings()
    >>> settings.listen_port
    2121
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import yaml

from ftpdriver.core.constants import Defaults, ErrorCode
from ftpdriver.infrastructure.logger import Logger


class ConfigLoadError(Exception):
    """Settings document could not be loaded. Fatal for the caller."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class AddressResolutionError(Exception):
    """External address lookup failed."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.DEPENDENCY_ERROR):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


@dataclass(frozen=True)
class PortRange:
    """Passive-mode data port range."""

    start: int
    end: int


@dataclass
class Settings:
    """General settings around the server setup.

    Only ``public_host`` is interpreted by the driver; the other fields are
    handed to the protocol engine untouched. Keys the driver does not know
    about are preserved in ``extra``.
    """

    listen_host: str = "0.0.0.0"
    listen_port: int = 2121
    public_host: str = ""
    max_connections: int = 10
    data_port_range: Optional[PortRange] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra")
        if data["data_port_range"] is None:
            del data["data_port_range"]
        data.update(extra)
        return data


# Expected type per recognised key
SETTINGS_SCHEMA: Dict[str, Any] = {
    "listen_host": str,
    "listen_port": int,
    "public_host": str,
    "max_connections": int,
    "data_port_range": {"start": int, "end": int},
}


def _validate_dict(config: Dict[str, Any], schema: Dict[str, Any], prefix: str = "") -> None:
    """Check value types against ``schema``; absent keys are allowed.

    Raises:
        ConfigLoadError: If a value has the wrong type
    """
    for key, expected_type in schema.items():
        if key not in config or config[key] is None:
            continue

        value = config[key]
        qualified = f"{prefix}{key}"

        if isinstance(expected_type, dict):
            if not isinstance(value, dict):
                raise ConfigLoadError(
                    f"Expected mapping for {qualified}, got {type(value).__name__}"
                )
            missing = [k for k in expected_type if k not in value]
            if missing:
                raise ConfigLoadError(f"Missing {', '.join(missing)} in {qualified}")
            _validate_dict(value, expected_type, prefix=f"{qualified}.")
        # bool is an int subclass but never a valid port or count
        elif isinstance(value, bool) or not isinstance(value, expected_type):
            raise ConfigLoadError(
                f"Expected {expected_type.__name__} for {qualified}, "
                f"got {type(value).__name__}"
            )


def parse_settings(config_data: Dict[str, Any]) -> Settings:
    """Build ``Settings`` from a parsed document.

    Args:
        config_data: Mapping loaded from the settings file

    Returns:
        Settings instance

    Raises:
        ConfigLoadError: If a recognised key has the wrong type
    """
    _validate_dict(config_data, SETTINGS_SCHEMA)

    values = {k: v for k, v in config_data.items() if k in SETTINGS_SCHEMA and v is not None}
    extra = {k: v for k, v in config_data.items() if k not in SETTINGS_SCHEMA}

    port_range = values.pop("data_port_range", None)
    if port_range is not None:
        values["data_port_range"] = PortRange(start=port_range["start"], end=port_range["end"])

    return Settings(extra=extra, **values)


def load_settings_file(file_path: str) -> Settings:
    """Read and parse a YAML settings document.

    Args:
        file_path: Path to the settings file

    Returns:
        Parsed settings (``public_host`` not yet resolved)

    Raises:
        ConfigLoadError: If the file is missing, unreadable or malformed
    """
    path = Path(file_path).expanduser()

    if not path.exists():
        raise ConfigLoadError(f"Settings file not found: {file_path}", ErrorCode.NOT_FOUND)

    try:
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"YAML parse error in {file_path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(
            f"Error reading settings {file_path}: {e}", ErrorCode.INTERNAL_ERROR
        ) from e

    # An empty document is a valid, all-defaults configuration
    if config_data is None:
        config_data = {}

    if not isinstance(config_data, dict):
        raise ConfigLoadError(f"Invalid settings format in {file_path}")

    return parse_settings(config_data)


def external_ip(url: str = Defaults.ADDRESS_SERVICE_URL, timeout: Optional[float] = None) -> str:
    """Ask an address-echo service for our public address.

    Args:
        url: Endpoint answering with the caller's address as plain text
        timeout: Optional request timeout in seconds (httpx default if None)

    Returns:
        The address with surrounding whitespace removed

    Raises:
        AddressResolutionError: If the request or the body read fails
    """
    kwargs: Dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout

    try:
        response = httpx.get(url, **kwargs)
        response.raise_for_status()
        return response.text.strip()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise AddressResolutionError(f"Address lookup via {url} failed: {e}") from e


class SettingsResolver:
    """Loads settings on demand and fills in the public host when missing."""

    def __init__(
        self,
        settings_file: str,
        logger: Logger,
        address_service: str = Defaults.ADDRESS_SERVICE_URL,
    ):
        """Initialize resolver.

        Args:
            settings_file: Path to the YAML settings document
            logger: Shared logger
            address_service: URL of the address-echo endpoint
        """
        self.settings_file = settings_file
        self.logger = logger
        self.address_service = address_service

    def get_settings(self) -> Settings:
        """Load settings fresh from disk.

        Returns:
            Settings with ``public_host`` resolved when possible

        Raises:
            ConfigLoadError: If the settings document cannot be loaded
        """
        settings = load_settings_file(self.settings_file)

        if not settings.public_host:
            self.logger.debug("Fetching our external IP address...")
            try:
                settings.public_host = external_ip(self.address_service)
            except AddressResolutionError as e:
                self.logger.warning("Couldn't fetch an external IP", err=e)
            else:
                self.logger.debug(
                    "Fetched our external IP address", ip_address=settings.public_host
                )

        return settings
