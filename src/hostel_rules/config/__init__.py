"""Configuration loaders for the rules engine."""

from .courses import CourseConfig
from .loader import ConfigLoader
from .rates import RateConfig
from .rooms import RoomConfig

__all__ = [
    "ConfigLoader",
    "CourseConfig",
    "RateConfig",
    "RoomConfig",
]
