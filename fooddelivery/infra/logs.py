import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import insert, select
from .db import engine, init_db, logs_table, order_events_table
from .settings import settings

# ---------- DB logging handler ----------

class DBHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            with engine.begin() as conn:
                conn.execute(insert(logs_table).values(level=record.levelname, msg=msg))
        except Exception:
            # Logging mag een order nooit laten mislukken
            self.handleError(record)


def setup_logging() -> None:
    init_db()
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        root.addHandler(logging.StreamHandler())
    if not any(isinstance(h, DBHandler) for h in root.handlers):
        dbh = DBHandler()
        dbh.setFormatter(logging.Formatter("%(levelname)s %(name)s %(message)s"))
        root.addHandler(dbh)

# ---------- Queries voor de administrator ----------

def get_events(
    limit: int = 300,
    level: Optional[str] = None,
    q: Optional[str] = None,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    stmt = select(logs_table.c.ts, logs_table.c.level, logs_table.c.msg)
    if level in ("INFO", "WARNING", "ERROR"):
        stmt = stmt.where(logs_table.c.level == level)
    if q:
        stmt = stmt.where(logs_table.c.msg.ilike(f"%{q}%"))
    stmt = stmt.order_by(logs_table.c.id.desc()).limit(int(limit)).offset(int(max(0, offset)))
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [dict(r) for r in rows]

# ---------- Order-events ----------

def _jsonable(data: Any) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    try:
        return json.loads(json.dumps(data))
    except (TypeError, ValueError):
        return {"_repr": str(data)}


def log_order_event(
    order_id: str,
    event: str,
    actor: Optional[str] = None,
    data: Any = None,
    ts: Optional[datetime] = None,
) -> None:
    values = {
        "order_id": order_id,
        "event": event,
        "actor": actor,
        "data_json": _jsonable(data),
    }
    if ts is not None:
        values["ts"] = ts
    with engine.begin() as conn:
        conn.execute(insert(order_events_table).values(**values))


def get_order_events(order_id: str) -> List[Dict[str, Any]]:
    t = order_events_table
    stmt = (
        select(t.c.order_id, t.c.ts, t.c.event, t.c.actor, t.c.data_json.label("data"))
        .where(t.c.order_id == order_id)
        .order_by(t.c.ts.asc(), t.c.id.asc())
    )
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [dict(r) for r in rows]
