from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from resourcelibrary_backend.api.resourcelibrary import limiter, resourcelibrary_router
from resourcelibrary_backend.business_logic.courses import ensure_site_course
from resourcelibrary_backend.database import SessionLocal, get_engine
from resourcelibrary_backend.exceptions import register_exception_handlers
from resourcelibrary_backend.model import Base
from resourcelibrary_backend.settings import settings

logger = logging.getLogger(__name__)


def startup_logic():
    Base.metadata.create_all(bind=get_engine())

    db = SessionLocal()
    try:
        ensure_site_course(db)
        db.commit()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_logic()
    logger.info(f"Resource library backend started (DEBUG_MODE={settings.DEBUG_MODE})")
    yield


app = FastAPI(lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Register custom exception handlers for structured error responses
register_exception_handlers(app)

origins = [
    "http://localhost:3000",
    "http://localhost:8000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resourcelibrary_router, tags=["resourcelibrary"])


def main():
    import uvicorn

    logging.basicConfig(level=logging.DEBUG if settings.DEBUG_MODE != "production" else logging.INFO)
    uvicorn.run(
        "resourcelibrary_backend.server:app",
        host=os.environ.get("API_HOST", "0.0.0.0"),
        port=int(os.environ.get("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
