"""StayTrack – FastAPI application."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staytrack.config import get_settings
from staytrack.database import Base, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from staytrack.models import Traveler, Stay, PolicyRule, ComplianceAlert  # noqa: F401
from staytrack.routers import policies, travelers, stays, compliance

settings = get_settings()
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(policies.router)
app.include_router(travelers.router)
app.include_router(stays.router)
app.include_router(compliance.router)

log = logging.getLogger("uvicorn.error")


@app.on_event("startup")
def startup():
    log.setLevel(settings.log_level.upper())
    try:
        Base.metadata.create_all(bind=engine)
        from staytrack.database import SessionLocal
        from staytrack.seed import seed_policy_rules
        from staytrack.services.ledger_store import load_registry
        db = SessionLocal()
        try:
            seed_policy_rules(db)
            app.state.policy_registry = load_registry(db)
        finally:
            db.close()
        log.info("Loaded %d stay policies.", len(app.state.policy_registry))
    except Exception as e:
        log.warning("Database startup failed (tables/seed skipped, using built-in policies). Error: %s", e)

    if settings.compliance_check_enabled:
        from apscheduler.schedulers.background import BackgroundScheduler
        from staytrack.services.stay_monitor import run_compliance_check_job
        scheduler = BackgroundScheduler()
        scheduler.add_job(run_compliance_check_job, "cron", hour=settings.compliance_check_hour, minute=0)
        scheduler.start()
        app.state.scheduler = scheduler


@app.on_event("shutdown")
def shutdown():
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.shutdown(wait=False)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
