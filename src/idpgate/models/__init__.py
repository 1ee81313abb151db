"""Domain models for idpgate."""

from idpgate.models.directory import DirectoryRecord
from idpgate.models.event import LifecycleEvent

__all__ = ["DirectoryRecord", "LifecycleEvent"]
