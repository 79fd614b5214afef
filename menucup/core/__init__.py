"""
Core module initialization.
Exports configuration and logging utilities.
"""

from menucup.core.config import (
    get_settings,
    setup_logging,
    Settings,
    EnvironmentMode,
    ReorderPersistMode,
)

__all__ = ["get_settings", "setup_logging", "Settings", "EnvironmentMode", "ReorderPersistMode"]
