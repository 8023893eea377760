"""Width-constrained buffer tabline engine for text editor hosts."""

from .config import ConfigResult, StyleConfig, TablineConfig, validate_config
from .engine import TablineEngine
from .runtime.scheduler import ManualDeferrer, UpdateScheduler

__all__ = [
    "TablineEngine",
    "TablineConfig",
    "StyleConfig",
    "ConfigResult",
    "validate_config",
    "UpdateScheduler",
    "ManualDeferrer",
    "adapters",
    "buffers",
    "cache",
    "host",
    "keymaps",
    "layout",
    "render",
    "runtime",
]

__version__ = "0.1.0"
