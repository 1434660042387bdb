import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fooddelivery.core.errors import (
    AlreadyClaimed, AlreadyRated, CancellationWindowClosed, FulfillmentError,
    InternalError, InvalidTransition, NotFound, Unauthorized,
)
from fooddelivery.adapters.json_snapshot_store import JsonSnapshotStore
from fooddelivery.infra.logs import setup_logging
from fooddelivery.infra.seed import seed_demo
from fooddelivery.infra.settings import is_dev
from fooddelivery.app.state import get_platform
from fooddelivery.app.account_routes import router as account_router
from fooddelivery.app.admin import router as admin_router
from fooddelivery.app.cart_routes import router as cart_router
from fooddelivery.app.catalog_routes import router as catalog_router
from fooddelivery.app.complaint_routes import router as complaint_router
from fooddelivery.app.order_routes import router as order_router

setup_logging()
log = logging.getLogger("fooddelivery.app")
app = FastAPI()
store = JsonSnapshotStore()

# Volgorde telt: subklassen eerst
_STATUS = [
    (NotFound, 404),
    (Unauthorized, 403),
    (AlreadyClaimed, 409),
    (InvalidTransition, 409),
    (CancellationWindowClosed, 409),
    (AlreadyRated, 409),
]


def status_for(exc: FulfillmentError) -> int:
    for kind, code in _STATUS:
        if isinstance(exc, kind):
            return code
    return 400


@app.exception_handler(FulfillmentError)
async def _fulfillment_error(request: Request, exc: FulfillmentError):
    return JSONResponse(status_code=status_for(exc), content=exc.as_dict())


@app.exception_handler(InternalError)
async def _internal_error(request: Request, exc: InternalError):
    log.error("Internal error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500,
                        content={"ok": False, "error": "InternalError", "message": str(exc)})


@app.on_event("startup")
def _load_state():
    p = get_platform()
    data = store.load()
    if data is not None:
        p.restore(data)
        log.info("Loaded snapshot from %s", store.path)
    elif is_dev():
        seed_demo(p)
        log.info("Started with demo data")


@app.on_event("shutdown")
def _save_state():
    store.save(get_platform().snapshot())
    log.info("Saved snapshot to %s", store.path)


@app.get("/")
def read_root():
    return {"status": "ok", "message": "Food delivery backend actief"}


@app.get("/healthz")
def health():
    return {"ok": True}


app.include_router(catalog_router)
app.include_router(account_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(complaint_router)
app.include_router(admin_router)
