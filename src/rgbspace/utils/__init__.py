from .formatting import format_matrix, format_vector
from .logging_utils import configure_logging

__all__ = ["configure_logging", "format_matrix", "format_vector"]
