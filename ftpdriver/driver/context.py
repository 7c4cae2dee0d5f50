"""
Session context capability.

The protocol engine owns one context per client connection and passes it to
every driver callback. The driver only reads the current path and reads or
flips the debug flag; it keeps no per-session state of its own.
"""

from abc import ABC, abstractmethod


class ClientContext(ABC):
    """What the driver needs from a session.

    Engines with their own session type either subclass this or register
    it with ``ClientContext.register(SessionType)``.
    """

    @property
    @abstractmethod
    def path(self) -> str:
        """Current logical path of the session."""

    @property
    @abstractmethod
    def debug(self) -> bool:
        """Whether debug instrumentation is enabled."""

    @debug.setter
    @abstractmethod
    def debug(self, value: bool) -> None:
        pass


class SessionContext(ClientContext):
    """Plain in-process session, used by the CLI and tests."""

    def __init__(self, path: str = "/", debug: bool = False):
        self._path = path
        self._debug = debug

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, value: str) -> None:
        self._path = value

    @property
    def debug(self) -> bool:
        return self._debug

    @debug.setter
    def debug(self, value: bool) -> None:
        self._debug = value

    def __repr__(self) -> str:
        return f"SessionContext(path='{self._path}', debug={self._debug})"
