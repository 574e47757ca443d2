from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from apps.api.config import settings
from apps.api.routers import calculator
from apps.api.sessions import CalculatorSessions
import logging

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Position Calculator API",
    description="Risk-based position sizing, leverage and liquidation estimate for USDT perpetuals",
    version="1.0.0"
)

app.state.calculator_sessions = CalculatorSessions(max_sessions=settings.MAX_SESSIONS)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(calculator.router, prefix=f"{settings.API_V1_PREFIX}/calculator", tags=["Calculator"])


@app.get("/health")
async def health():
    return {"status": "ok"}
