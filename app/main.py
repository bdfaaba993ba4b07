import asyncio
import logging
import time

from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from app.db.init_db import create_database
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.api.router import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def _slot_cleanup_loop() -> None:
    """Background task: close open slots that have already started."""
    from app.utils.slots import close_past_slots

    while True:
        try:
            db = SessionLocal()
            try:
                count = close_past_slots(db)
                if count:
                    logger.info("Closed %d past availability slot(s).", count)
            finally:
                db.close()
        except Exception:
            logger.exception("Error during past-slot cleanup.")
        await asyncio.sleep(settings.SLOT_CLEANUP_INTERVAL_SECONDS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    create_database()
    Base.metadata.create_all(bind=engine)

    # Run an immediate cleanup, then keep running in the background
    cleanup_task = asyncio.create_task(_slot_cleanup_loop())
    yield

    # Shutdown: cancel background task
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Any origin outside production, the configured whitelist in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith(settings.API_PREFIX):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %s in %.0fms",
            request.method, request.url.path, response.status_code, duration_ms,
        )
    return response


register_exception_handlers(app)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/")
@limiter.exempt
def read_root():
    return {"Hello": "Rainbow Tour Guides"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
