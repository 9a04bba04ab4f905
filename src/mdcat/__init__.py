"""Render markdown documents to the terminal."""

from .config import AppConfig, load_config
from .constants import DEFAULT_RESOURCE_READ_LIMIT, __version__
from .core import ViewerService, process_file
from .input import read_input
from .models import InputResult, ProcessOptions, ResourceAccess
from .resources import DispatchingResourceHandler, create_resource_handler
from .stats import DocumentStats, LineNumberFormatter, annotate_line_numbers

__all__ = [
    "AppConfig",
    "DEFAULT_RESOURCE_READ_LIMIT",
    "DispatchingResourceHandler",
    "DocumentStats",
    "InputResult",
    "LineNumberFormatter",
    "ProcessOptions",
    "ResourceAccess",
    "ViewerService",
    "__version__",
    "annotate_line_numbers",
    "create_resource_handler",
    "load_config",
    "process_file",
    "read_input",
]
