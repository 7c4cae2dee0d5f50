#!/usr/bin/env python3
"""Tests for the CertificateCache module."""

import ssl
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ftpdriver.core.constants import Defaults, ErrorCode
from ftpdriver.infrastructure.tls_cache import CertificateCache, CertificateLoadError


# Captured before any patch replaces ssl.SSLContext
_SSL_CONTEXT = ssl.SSLContext


def _fake_context_class():
    """SSLContext replacement returning a fresh mock per construction."""
    return MagicMock(side_effect=lambda *args, **kwargs: MagicMock(spec=_SSL_CONTEXT))


@pytest.fixture
def cache(logger, tmp_path):
    return CertificateCache(
        logger,
        certfile=str(tmp_path / "mycert.crt"),
        keyfile=str(tmp_path / "mycert.key"),
    )


class TestSuccessfulLoad:
    """Tests for the first successful load and caching."""

    def test_builds_server_context(self, cache):
        fake = _fake_context_class()
        with patch("ftpdriver.infrastructure.tls_cache.ssl.SSLContext", fake):
            context = cache.get_tls_config()

        fake.assert_called_once_with(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain.assert_called_once_with(
            certfile=cache.certfile, keyfile=cache.keyfile
        )

    def test_advertises_ftp_alpn(self, cache):
        with patch("ftpdriver.infrastructure.tls_cache.ssl.SSLContext", _fake_context_class()):
            context = cache.get_tls_config()

        context.set_alpn_protocols.assert_called_once_with(["ftp"])

    def test_cached_after_first_load(self, cache):
        fake = _fake_context_class()
        with patch("ftpdriver.infrastructure.tls_cache.ssl.SSLContext", fake):
            first = cache.get_tls_config()
            second = cache.get_tls_config()
            third = cache.get_tls_config()

        assert first is second is third
        assert fake.call_count == 1
        assert cache.load_count == 1
        assert cache.loaded

    def test_disk_not_touched_after_load(self, cache):
        with patch("ftpdriver.infrastructure.tls_cache.ssl.SSLContext", _fake_context_class()):
            first = cache.get_tls_config()

        # Real SSLContext would now fail on the missing files
        assert cache.get_tls_config() is first

    def test_logs_loading(self, cache, log_handler):
        with patch("ftpdriver.infrastructure.tls_cache.ssl.SSLContext", _fake_context_class()):
            cache.get_tls_config()
            cache.get_tls_config()

        loading = [m for m in log_handler.messages() if "Loading certificate" in m]
        assert len(loading) == 1


class TestFailedLoad:
    """Tests for load failures."""

    def test_missing_files(self, cache):
        with pytest.raises(CertificateLoadError) as exc_info:
            cache.get_tls_config()

        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert not cache.loaded

    def test_malformed_certificate(self, cache, tmp_path):
        (tmp_path / "mycert.crt").write_text("not a certificate")
        (tmp_path / "mycert.key").write_text("not a key")

        with pytest.raises(CertificateLoadError) as exc_info:
            cache.get_tls_config()

        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT
        assert isinstance(exc_info.value.__cause__, ssl.SSLError)

    def test_failure_not_cached(self, cache):
        with pytest.raises(CertificateLoadError):
            cache.get_tls_config()

        with patch("ftpdriver.infrastructure.tls_cache.ssl.SSLContext", _fake_context_class()):
            context = cache.get_tls_config()

        assert context is not None
        assert cache.loaded
        assert cache.load_count == 2

    def test_retries_every_call_until_success(self, cache):
        for _ in range(3):
            with pytest.raises(CertificateLoadError):
                cache.get_tls_config()
        assert cache.load_count == 3


class TestConcurrentFirstAccess:
    """Tests for racing first calls."""

    def test_all_callers_get_same_context(self, cache):
        workers = 8
        barrier = threading.Barrier(workers, timeout=5)

        def slow_context(*args, **kwargs):
            context = MagicMock(spec=_SSL_CONTEXT)
            # Hold every loader until all of them are parsing
            context.load_cert_chain.side_effect = lambda **kw: barrier.wait()
            return context

        results = []
        errors = []

        def worker():
            try:
                results.append(cache.get_tls_config())
            except Exception as e:
                errors.append(e)

        with patch(
            "ftpdriver.infrastructure.tls_cache.ssl.SSLContext",
            MagicMock(side_effect=slow_context),
        ):
            threads = [threading.Thread(target=worker) for _ in range(workers)]
            for t in threads:
                t.start()
            for t in threads:
                t.join(timeout=10)

        assert errors == []
        assert len(results) == workers
        assert all(r is results[0] for r in results)
        assert cache.load_count <= workers
        assert cache.get_tls_config() is results[0]


class TestSampleCertificate:
    """Tests against the shipped self-signed certificate, without mocks."""

    @pytest.fixture
    def sample_cache(self, logger):
        root = Path(__file__).resolve().parents[2]
        return CertificateCache(
            logger,
            certfile=str(root / Defaults.CERT_FILE),
            keyfile=str(root / Defaults.KEY_FILE),
        )

    def test_loads_real_pem_pair(self, sample_cache):
        context = sample_cache.get_tls_config()

        assert isinstance(context, ssl.SSLContext)
        assert context.protocol == ssl.PROTOCOL_TLS_SERVER

    def test_real_context_cached(self, sample_cache):
        first = sample_cache.get_tls_config()
        second = sample_cache.get_tls_config()

        assert first is second
        assert sample_cache.load_count == 1
