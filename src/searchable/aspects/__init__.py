"""Search aspects: the pluggable sources a `Search` fans out to."""

from .base import SearchAspect
from .model import ModelSearchAspect

__all__ = ["SearchAspect", "ModelSearchAspect"]
