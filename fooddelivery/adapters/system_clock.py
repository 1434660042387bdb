from datetime import datetime
import zoneinfo
from fooddelivery.ports.clock import Clock
from fooddelivery.infra.settings import settings

class SystemClock(Clock):
    def __init__(self, tz: str = settings.TZ):
        self.tz = zoneinfo.ZoneInfo(tz)

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)
