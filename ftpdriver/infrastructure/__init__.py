"""ftpdriver Infrastructure Layer.

Services used by the driver façade:
- Logger: Structured logging system
- SettingsResolver: Settings document loading with public-host lookup
- CertificateCache: Load-once TLS configuration
"""

from .logger import Logger, LogLevel
from .settings import (
    AddressResolutionError,
    ConfigLoadError,
    PortRange,
    Settings,
    SettingsResolver,
    external_ip,
    load_settings_file,
)
from .tls_cache import CertificateCache, CertificateLoadError

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    # Settings exports
    "AddressResolutionError",
    "ConfigLoadError",
    "PortRange",
    "Settings",
    "SettingsResolver",
    "external_ip",
    "load_settings_file",
    # TLS exports
    "CertificateCache",
    "CertificateLoadError",
]
