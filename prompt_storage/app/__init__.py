"""
Prompt Storage Service - stores versioned prompts and their metadata.
"""

__version__ = "0.1.0"

# Import core components for easier access
from .core.config import settings  # noqa
from .core.logger import get_logger  # noqa

__all__ = ["settings", "get_logger"]
