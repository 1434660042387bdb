from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

class SnapshotStore(ABC):
    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """Laatst opgeslagen snapshot, of None als er nog niets is."""
        pass

    @abstractmethod
    def save(self, snapshot: Dict[str, Any]) -> None:
        """Schrijft de volledige snapshot atomair weg."""
        pass
