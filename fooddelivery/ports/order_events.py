from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

@dataclass
class OrderEvent:
    order_id: str
    event: str
    actor: Optional[str]
    ts: datetime
    data: Dict[str, Any] = field(default_factory=dict)

class OrderEventSink(ABC):
    @abstractmethod
    def record(self, event: OrderEvent) -> None:
        """Slaat een order-gebeurtenis op voor de audit trail."""
        pass

    @abstractmethod
    def events_for(self, order_id: str) -> List[OrderEvent]:
        """Alle gebeurtenissen van één order, oudste eerst."""
        pass
