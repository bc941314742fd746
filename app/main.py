import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import analyze, resume, cover_letter, interview, export, health
from app.core.config import CORS_ALLOWED_ORIGINS, LOG_LEVEL
from app.core.logging_config import setup_logging

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Resume ATS Checker API", version="1.0.0")

# ✅ CORS: only the configured frontends
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(analyze.router)
app.include_router(resume.router)
app.include_router(cover_letter.router)
app.include_router(interview.router)
app.include_router(export.router)
app.include_router(health.router)


# ============================================
# ✅ ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Resume ATS Checker API running"}


logger.info("Resume ATS Checker API initialized")
