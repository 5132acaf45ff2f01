from __future__ import annotations
import time
from fastapi import APIRouter

from travelkitchen.shared.config.settings import settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {"ok": True, "ts": time.time(), "llm_configured": bool(settings.OPENAI_API_KEY)}
