import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import dex, health
from .config import settings
from .core.dex import OKXDexTool
from .core.dex.factory import close_default_tool
from .logging_config import setup_logging

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "dexchat starting: chain=%s okx_credentials=%s wallet=%s",
        settings.dex_chain_id,
        settings.has_okx_credentials,
        settings.has_wallet,
    )
    yield
    # The default tool owns the OKX and Solana RPC clients.
    await close_default_tool()


app = FastAPI(
    title="dexchat",
    description="Conversational OKX DEX tool for Solana swaps",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(dex.router, tags=["DEX"])


@app.get("/")
async def root():
    """Service info and the tool's agent-facing description"""
    return {
        "name": "dexchat",
        "version": "0.1.0",
        "tool": OKXDexTool.name,
        "description": OKXDexTool.description,
        "docs": "/docs",
        "health": "/healthz",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dexchat.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
