from __future__ import annotations
import json, os
from pathlib import Path
from typing import Any, Dict, Optional
from fooddelivery.ports.snapshot_store import SnapshotStore
from fooddelivery.infra.settings import settings

class JsonSnapshotStore(SnapshotStore):
    def __init__(self, path: str | Path = settings.DATA_FILE):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, snapshot: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # eerst naar tijdelijk bestand, dan vervangen: nooit een half bestand
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)
