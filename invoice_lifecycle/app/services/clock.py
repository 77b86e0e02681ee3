"""Clock Interface

Supplies "now" to the engine so batch runs are reproducible.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime


class Clock(ABC):
    """Source of the current time"""

    @abstractmethod
    def now(self) -> datetime:
        pass

    def today(self) -> date:
        return self.now().date()
