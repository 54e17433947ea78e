import base64
import re
import ssl

import pytest

from shared.config import DEFAULT_POOL_SIZE, Settings
from shared.errors import ConfigurationError


class TestFromEnv:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.port == 3000
        assert settings.pool_size == DEFAULT_POOL_SIZE == 12
        assert settings.db_driver == "mysql+aiomysql"
        assert settings.cors_origins == ["*"]
        assert settings.ssl_context() is None

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-5", "70000", "80x"])
    def test_invalid_port_falls_back(self, raw):
        assert Settings.from_env({"PORT": raw}).port == 3000

    @pytest.mark.parametrize("name", ["DB_PORT", "DB_POOL_SIZE", "DB_POOL_TIMEOUT"])
    def test_non_numeric_database_setting(self, name):
        with pytest.raises(ConfigurationError, match=name):
            Settings.from_env({name: "abc"})

    def test_pool_timeout_accepts_fractions(self):
        assert Settings.from_env({"DB_POOL_TIMEOUT": "2.5"}).pool_timeout == 2.5

    def test_port_from_env(self):
        assert Settings.from_env({"PORT": "8080"}).port == 8080

    def test_database_fields(self):
        settings = Settings.from_env(
            {
                "DB_HOST": "db.example.com",
                "DB_PORT": "25060",
                "DB_USER": "admin",
                "DB_PASSWORD": "p@ss:word",
                "DB_NAME": "schooldb",
                "DB_POOL_SIZE": "4",
                "CORS_ORIGINS": "https://a.example, https://b.example",
            }
        )
        url = settings.database_url
        assert url.drivername == "mysql+aiomysql"
        assert url.host == "db.example.com"
        assert url.port == 25060
        assert url.username == "admin"
        assert url.password == "p@ss:word"
        assert url.database == "schooldb"
        assert settings.pool_size == 4
        assert settings.cors_origins == ["https://a.example", "https://b.example"]

    def test_database_url_override(self):
        settings = Settings.from_env({"DATABASE_URL": "sqlite+aiosqlite:///tmp/x.db", "DB_HOST": "ignored"})
        assert settings.database_url.get_backend_name() == "sqlite"


class TestSslContext:
    def test_invalid_base64(self):
        settings = Settings(ca_cert="not base64!!")
        with pytest.raises(ConfigurationError):
            settings.ssl_context()

    def test_base64_of_garbage_certificate(self):
        settings = Settings(ca_cert=base64.b64encode(b"-----BEGIN CERTIFICATE-----\nxx\n").decode())
        with pytest.raises(ConfigurationError):
            settings.ssl_context()

    def test_unreadable_path(self, tmp_path):
        settings = Settings(ca_cert_path=str(tmp_path / "missing.pem"))
        with pytest.raises(ConfigurationError):
            settings.ssl_context()

    def test_loads_system_ca_from_path(self, tmp_path):
        paths = ssl.get_default_verify_paths()
        if not paths.cafile:
            pytest.skip("no system CA bundle available")
        with open(paths.cafile, "rb") as fh:
            pem = fh.read()
        cert_file = tmp_path / "ca.pem"
        cert_file.write_bytes(pem)

        context = Settings(ca_cert_path=str(cert_file)).ssl_context()
        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname

    def test_inline_cert_preferred_over_path(self, tmp_path):
        paths = ssl.get_default_verify_paths()
        if not paths.cafile:
            pytest.skip("no system CA bundle available")
        with open(paths.cafile, "rb") as fh:
            bundle = fh.read()
        match = re.search(rb"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----\n?", bundle, re.S)
        if match is None:
            pytest.skip("system CA bundle holds no PEM certificates")
        inline = base64.b64encode(match.group(0)).decode()

        settings = Settings(ca_cert=inline, ca_cert_path=str(tmp_path / "missing.pem"))
        assert settings.ssl_context() is not None
