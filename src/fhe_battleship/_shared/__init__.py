# Area: Shared
"""
fhe_battleship._shared — Cross-cutting helpers
==============================================
"""

from .logging_config import setup_logging, log_rejection

__all__ = ["setup_logging", "log_rejection"]
