"""logstash_udp public API."""

from .api import configure, get_context_logger, get_logger, shutdown
from .config.schema import LogstashConfig
from .core import context as mdc
from .core.validation import ConfigurationError
from .handlers.logstash_udp import LogstashUDPHandler, build_logstash_handler, create_handler
from .version import __version__

__all__ = [
    "configure",
    "get_logger",
    "get_context_logger",
    "shutdown",
    "mdc",
    "LogstashConfig",
    "LogstashUDPHandler",
    "build_logstash_handler",
    "create_handler",
    "ConfigurationError",
    "__version__",
]
