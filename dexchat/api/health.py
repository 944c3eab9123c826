from fastapi import APIRouter
from typing import Dict, Any

from ..config import settings
from ..providers.okx import OKXDexProvider

router = APIRouter()


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint that verifies provider status"""

    provider = OKXDexProvider()
    try:
        provider_status = {"okx_dex": await provider.health_check()}
    finally:
        await provider.close()

    healthy = provider_status["okx_dex"]["status"] == "healthy"
    return {
        "status": "healthy" if healthy else "degraded",
        "providers": provider_status,
        "wallet_configured": settings.has_wallet,
        "chain_id": settings.dex_chain_id,
    }
