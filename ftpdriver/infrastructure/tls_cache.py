#!/usr/bin/env python3
"""Lazily loaded TLS configuration for ftpdriver.

The certificate and key are parsed on the first request and the resulting
``ssl.SSLContext`` is kept for the rest of the process lifetime. Failures
are never cached: the next call simply tries again.

Concurrent first calls are not serialized. Each may parse the files, but
only the first finished load is published and every caller receives that
one context.
"""

import ssl
import threading
from typing import Optional, Sequence

from ftpdriver.core.constants import Defaults, ErrorCode
from ftpdriver.infrastructure.logger import Logger


class CertificateLoadError(Exception):
    """Certificate or private key could not be loaded."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class CertificateCache:
    """Load-once holder for the server TLS context."""

    def __init__(
        self,
        logger: Logger,
        certfile: str = Defaults.CERT_FILE,
        keyfile: str = Defaults.KEY_FILE,
        alpn_protocols: Sequence[str] = Defaults.ALPN_PROTOCOLS,
    ):
        """Initialize cache.

        Args:
            logger: Shared logger
            certfile: Path to the PEM certificate
            keyfile: Path to the PEM private key
            alpn_protocols: Application protocols advertised during handshake
        """
        self.logger = logger
        self.certfile = certfile
        self.keyfile = keyfile
        self.alpn_protocols = list(alpn_protocols)

        self._context: Optional[ssl.SSLContext] = None
        self._lock = threading.Lock()
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        return self._context is not None

    def _build_context(self) -> ssl.SSLContext:
        with self._lock:
            self.load_count += 1

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        try:
            context.load_cert_chain(certfile=self.certfile, keyfile=self.keyfile)
        except FileNotFoundError as e:
            raise CertificateLoadError(
                f"Certificate file not found: {e.filename}", ErrorCode.NOT_FOUND
            ) from e
        except (OSError, ssl.SSLError) as e:
            raise CertificateLoadError(f"Could not load certificate {self.certfile}: {e}") from e

        context.set_alpn_protocols(self.alpn_protocols)
        return context

    def get_tls_config(self) -> ssl.SSLContext:
        """Return the TLS context, loading it on first use.

        Returns:
            Cached server-side SSL context

        Raises:
            CertificateLoadError: If the certificate or key cannot be loaded
        """
        cached = self._context
        if cached is not None:
            return cached

        self.logger.info("Loading certificate", certfile=self.certfile)
        context = self._build_context()

        with self._lock:
            if self._context is None:
                self._context = context
            return self._context
