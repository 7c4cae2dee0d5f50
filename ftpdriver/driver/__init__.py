"""ftpdriver protocol driver.

This package implements the callbacks of the file-transfer protocol engine:
- MainDriver: protocol callback implementations
- ClientContext: what the driver needs from a session

Usage:
    from ftpdriver.driver import SessionContext, new_sample_driver

    driver = new_sample_driver()
    entries = driver.list_files(SessionContext("/"))
"""

from ftpdriver.driver.context import ClientContext, SessionContext
from ftpdriver.driver.operations import AuthError, DriverError, MainDriver, new_sample_driver

__all__ = [
    "AuthError",
    "ClientContext",
    "DriverError",
    "MainDriver",
    "SessionContext",
    "new_sample_driver",
]
