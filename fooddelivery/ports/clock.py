from abc import ABC, abstractmethod
from datetime import datetime

class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Huidige tijd, timezone-aware."""
        pass
