# shared/config.py
import base64
import binascii
import os
import ssl
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url

from shared.errors import ConfigurationError

DEFAULT_PORT = 3000
DEFAULT_POOL_SIZE = 12


def _parse_number(environ: Mapping[str, str], name: str, default: str, cast):
    raw = environ.get(name, default)
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _parse_port(raw: Optional[str]) -> int:
    try:
        port = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_PORT
    if not 0 < port < 65536:
        return DEFAULT_PORT
    return port


@dataclass
class Settings:
    """Runtime configuration, built once at startup and passed around explicitly."""

    db_driver: str = "mysql+aiomysql"
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = "schools"
    database_url_override: Optional[str] = None

    ca_cert: Optional[str] = None
    ca_cert_path: Optional[str] = None

    pool_size: int = DEFAULT_POOL_SIZE
    pool_timeout: float = 30.0

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            load_dotenv()
            environ = os.environ

        origins = environ.get("CORS_ORIGINS", "*")
        return cls(
            db_driver=environ.get("DB_DRIVER", "mysql+aiomysql"),
            db_host=environ.get("DB_HOST", "localhost"),
            db_port=_parse_number(environ, "DB_PORT", "3306", int),
            db_user=environ.get("DB_USER", "root"),
            db_password=environ.get("DB_PASSWORD", ""),
            db_name=environ.get("DB_NAME", "schools"),
            database_url_override=environ.get("DATABASE_URL") or None,
            ca_cert=environ.get("CA_CERT") or None,
            ca_cert_path=environ.get("CA_CERT_PATH") or None,
            pool_size=_parse_number(environ, "DB_POOL_SIZE", str(DEFAULT_POOL_SIZE), int),
            pool_timeout=_parse_number(environ, "DB_POOL_TIMEOUT", "30", float),
            host=environ.get("HOST", "0.0.0.0"),
            port=_parse_port(environ.get("PORT")),
            log_level=environ.get("LOG_LEVEL", "INFO"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )

    @property
    def database_url(self) -> URL:
        if self.database_url_override:
            return make_url(self.database_url_override)
        return URL.create(
            self.db_driver,
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )

    def ssl_context(self) -> Optional[ssl.SSLContext]:
        """
        Build a verifying TLS context for the database connection.

        CA_CERT (base64 of a PEM or DER certificate) wins over CA_CERT_PATH.
        Returns None when neither is configured.
        """
        if self.ca_cert:
            try:
                raw = base64.b64decode(self.ca_cert, validate=True)
                # PEM goes in as text, DER as bytes
                cadata = raw.decode("ascii") if raw.lstrip().startswith(b"-----BEGIN") else raw
            except (binascii.Error, ValueError) as exc:
                raise ConfigurationError("CA_CERT is not valid base64 certificate data") from exc
            return self._build_context(cadata=cadata)

        if self.ca_cert_path:
            return self._build_context(cafile=self.ca_cert_path)

        return None

    @staticmethod
    def _build_context(**locations) -> ssl.SSLContext:
        try:
            context = ssl.create_default_context(**locations)
        except (OSError, ValueError) as exc:
            raise ConfigurationError("CA certificate could not be loaded") from exc
        context.check_hostname = True
        context.verify_mode = ssl.CERT_REQUIRED
        return context
