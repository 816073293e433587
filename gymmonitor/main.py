import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .api.routes import auth, classes, member, staff, misc
from .db.session import Base, engine, SessionLocal
from .config import get_settings
from .services.seed import seed
from .workers.scheduler import get_scheduler

logger = logging.getLogger(__name__)

app = FastAPI(title="GymMonitor Lite API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)
register_error_handlers(app)

app.include_router(auth.router, prefix="/api")
app.include_router(classes.router, prefix="/api")
app.include_router(member.router, prefix="/api")
app.include_router(staff.router, prefix="/api")
app.include_router(misc.router, prefix="/api")


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    settings = get_settings()
    if settings.seed_demo_data:
        with SessionLocal() as session:
            seed(session)
    if settings.billing_enabled:
        scheduler = get_scheduler()
        scheduler.start()
        app.state.scheduler = scheduler
        logger.info(
            "Billing scheduler started",
            extra={"hour": settings.billing_hour, "minute": settings.billing_minute},
        )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.shutdown(wait=False)
