"""Utility modules for mesh_evolve."""

from mesh_evolve.utils.log import setup_logger
from mesh_evolve.utils.run_manager import (
    RunManager,
    Run,
    RunMetadata,
    create_run,
    get_run_manager,
)

__all__ = [
    "setup_logger",
    "RunManager",
    "Run",
    "RunMetadata",
    "create_run",
    "get_run_manager",
]
