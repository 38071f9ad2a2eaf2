"""Utility functions for seqformats.

- Logging configuration
- Ordered thread fan-out

Example:
    >>> from seqformats.utils import setup_logging
    >>> setup_logging(verbosity=2)
"""

from seqformats.utils.logging import Timer, get_logger, setup_logging
from seqformats.utils.parallel import map_ordered

__all__ = ["Timer", "get_logger", "map_ordered", "setup_logging"]
