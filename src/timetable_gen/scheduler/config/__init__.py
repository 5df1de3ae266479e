"""Configuration loaders for the scheduler."""

from .courses import CourseConfig
from .grid import load_grid
from .instructors import InstructorConfig
from .loader import ConfigLoader
from .rooms import RoomConfig

__all__ = [
    "ConfigLoader",
    "CourseConfig",
    "InstructorConfig",
    "RoomConfig",
    "load_grid",
]
