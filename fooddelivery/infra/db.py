from sqlalchemy import (
    create_engine, MetaData, Table, Column, Integer, String, Text, DateTime, JSON, Index, func,
)
from sqlalchemy.pool import StaticPool
from .settings import settings

DATABASE_URL = settings.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Handlers schrijven vanuit meerdere threads
        kw = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kw["poolclass"] = StaticPool
        return kw
    return {"pool_pre_ping": True}


engine = create_engine(DATABASE_URL, future=True, **_engine_kwargs(DATABASE_URL))

metadata = MetaData()

# Generieke logs
logs_table = Table(
    "logs", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("ts", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("level", String(10), nullable=False),
    Column("msg", Text, nullable=False),
)

# Audit trail per order
order_events_table = Table(
    "order_events", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", String(36), nullable=False),
    Column("ts", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("event", String(40), nullable=False),
    Column("actor", String(100)),
    Column("data_json", JSON),
)
Index("idx_order_events_order_ts", order_events_table.c.order_id, order_events_table.c.ts)
Index("idx_order_events_event", order_events_table.c.event)


def init_db() -> None:
    """Maakt tabellen aan als ze nog niet bestaan."""
    metadata.create_all(engine)
