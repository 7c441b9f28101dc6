from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.exceptions import register_exception_handlers
from app.routers import alerts, allocation, health, lifecycle, risk

app = FastAPI(
    title="Spoilage Engine",
    description="Spoilage risk scoring, tier routing, batch lifecycle and sensor alerts",
    version="0.1.0",
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(risk.router, prefix="/api/risk", tags=["risk"])
app.include_router(lifecycle.router, prefix="/api/lifecycle", tags=["lifecycle"])
app.include_router(allocation.router, prefix="/api/allocation", tags=["allocation"])
app.include_router(alerts.router, prefix="/api/alerts", tags=["alerts"])
