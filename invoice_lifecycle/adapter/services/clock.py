"""Clock Implementations"""

from datetime import date, datetime, time, timedelta
from typing import Union
from invoice_lifecycle.app.services.clock import Clock


class SystemClock(Clock):
    """Wall clock in UTC"""

    def now(self) -> datetime:
        return datetime.utcnow()


class FixedClock(Clock):
    """Clock pinned to a given instant; advance() moves it forward"""

    def __init__(self, current: Union[datetime, date]):
        if not isinstance(current, datetime):
            current = datetime.combine(current, time(9, 0))
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current
