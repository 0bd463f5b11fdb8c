# streeteats/backend/app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.queue import router as queue_router
from .api.v1.vendors import router as vendors_router
from .config import DATABASE_URL, LOG_LEVEL, SEED_DEMO_VENDORS
from .db import Base, SessionLocal, engine
from .errors import ErrorResponse, QueueError, ValidationFailed
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .seed import seed_demo_vendors

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="StreetEats Queue")

app.include_router(queue_router)
app.include_router(vendors_router)


# Error envelope

@app.exception_handler(QueueError)
async def queue_error_handler(request: Request, exc: QueueError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().to_message())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    message = "; ".join(problems) or "Invalid request"
    body = ErrorResponse(code=ValidationFailed.code, message=message)
    return JSONResponse(status_code=ValidationFailed.status_code, content=body.to_message())


# Startup: local schema + demo data
# on_event is deprecated in favour of lifespan handlers; kept to match the
# startup seeding hook the service has always used.

@app.on_event("startup")
def prepare_database():
    # Non-SQLite databases are managed with alembic
    if DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    if not SEED_DEMO_VENDORS:
        return
    db = SessionLocal()
    try:
        seed_demo_vendors(db)
    finally:
        db.close()


@app.get("/health")
def health_check():
    return {"status": "ok"}
