"""Time source abstraction."""

from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Supplies the reference instant for a suggestion run."""

    @abstractmethod
    def now(self) -> datetime:
        """Current instant as an aware UTC datetime."""
        pass
