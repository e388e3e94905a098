import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import auth, billing, health, job_posts, ocr, payments, plans, stripe_proxy
from app.core.config import FRONTEND_URL, LOG_LEVEL, RUN_MIGRATIONS, get_settings
from app.core.logging_config import sanitize_log_data, setup_logging
from app.db.init_db import init_db
from app.db.migrate import run_migrations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL)
    if RUN_MIGRATIONS:
        run_migrations()
    else:
        init_db()
    logger.info(f"EmploySmart API started: settings={sanitize_log_data(get_settings())}")
    yield


# ============================================
# FASTAPI APP INIT
# ============================================

app = FastAPI(title="EmploySmart API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(job_posts.router)
app.include_router(plans.router)
app.include_router(billing.router)
app.include_router(payments.router)
app.include_router(stripe_proxy.router)
app.include_router(ocr.router)
app.include_router(health.router)

app.add_exception_handler(ocr.OCRRequestError, ocr.ocr_error_handler)


@app.get("/")
def root():
    return {"status": "EmploySmart API running"}
