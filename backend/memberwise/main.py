import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memberwise.config import settings

# ─── Logging setup (file + console) ───
_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

_handlers: list[logging.Handler] = [logging.StreamHandler()]
if settings.log_to_file:
    _LOG_DIR = Path(settings.log_dir)
    if not _LOG_DIR.is_absolute():
        _LOG_DIR = Path(__file__).resolve().parent.parent / _LOG_DIR
    _LOG_DIR.mkdir(parents=True, exist_ok=True)
    _handlers.append(
        RotatingFileHandler(
            _LOG_DIR / "memberwise.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
    )

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=_handlers,
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from memberwise.routers import catalog, recommendations

logger = logging.getLogger(__name__)


app = FastAPI(
    title="MemberWise",
    description="Museum membership recommendation service",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendations.router, prefix="/api/recommendations", tags=["recommendations"])
app.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "memberwise"}
