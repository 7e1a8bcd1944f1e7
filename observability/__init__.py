# Observability module
from .logging_config import ConsoleFormatter, StructuredFormatter, configure_logging, get_logger
from .timing import timed, TimingContext

__all__ = [
    "ConsoleFormatter",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "timed",
    "TimingContext",
]
