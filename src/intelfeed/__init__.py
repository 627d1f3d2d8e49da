"""intelfeed - normalize heterogeneous intel/news payloads into one record shape."""

from intelfeed.config import IntelFeedConfig, load_config
from intelfeed.models import (
    NormalizedDataItem,
    Priority,
    TimestampConfidence,
    VerificationStatus,
)
from intelfeed.registry import NormalizerPlugin, NormalizerRegistry, registry, run_plugin

__version__ = "0.1.0"

__all__ = [
    "IntelFeedConfig",
    "NormalizedDataItem",
    "NormalizerPlugin",
    "NormalizerRegistry",
    "Priority",
    "TimestampConfidence",
    "VerificationStatus",
    "load_config",
    "registry",
    "run_plugin",
]
