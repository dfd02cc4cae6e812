# Infrastructure Adapters Package
from .synthetic import SyntheticRepository
from .wanikani import WaniKaniRepository

__all__ = ["WaniKaniRepository", "SyntheticRepository"]
