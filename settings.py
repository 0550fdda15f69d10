"""Server configuration read from the environment."""
import logging
import os
from collections import namedtuple

DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 8080
PUBLIC_HOST = '0.0.0.0'

TRUTHY = ('1', 'true', 'yes', 'on')


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


class ServerConfig(namedtuple('ServerConfig', ['host', 'port', 'debug', 'log_level'])):
    __slots__ = ()

    @classmethod
    def from_env(cls, environ=None):
        """
        Build a config from PORT, FLASK_DEBUG and LOG_LEVEL.

        Without PORT the server stays on localhost:8080; with PORT it listens
        on every interface.
        """
        if environ is None:
            environ = os.environ

        port_value = environ.get('PORT', '').strip()
        if port_value:
            host = PUBLIC_HOST
            port = parse_port(port_value)
        else:
            host, port = DEFAULT_HOST, DEFAULT_PORT

        debug = environ.get('FLASK_DEBUG', 'False').strip().lower() in TRUTHY
        log_level = parse_log_level(environ.get('LOG_LEVEL', 'INFO'))
        return cls(host=host, port=port, debug=debug, log_level=log_level)

    @property
    def address(self):
        return f"{self.host}:{self.port}"


def parse_port(value):
    try:
        port = int(value)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")
    return port


def parse_log_level(value):
    level = value.strip().upper() or 'INFO'
    # getLevelName maps known names to their numeric level
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"LOG_LEVEL must be a logging level name, got {value!r}")
    return level
