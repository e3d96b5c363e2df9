"""Utils package initialization."""
from productlens.utils.logger import get_logger, LayerLogger, set_trace_id, get_trace_id
from productlens.utils.validation import InvalidURLError, validate_url

__all__ = [
    "get_logger",
    "LayerLogger",
    "set_trace_id",
    "get_trace_id",
    "InvalidURLError",
    "validate_url",
]
