from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from ..core.dex import DEFAULT_CONVERSATION_ID, OKXDexTool
from ..core.dex.factory import get_default_tool


router = APIRouter(prefix="/dex")


class ToolRequest(BaseModel):
    input: str = Field(description="JSON operation request or natural-language text")
    conversation_id: Optional[str] = Field(
        default=None,
        description="Conversation whose pending quote this request reads or replaces",
    )


@router.post("/tool")
async def post_tool(req: ToolRequest, tool: OKXDexTool = Depends(get_default_tool)) -> Dict[str, Any]:
    envelope = await tool.respond(req.input, req.conversation_id or DEFAULT_CONVERSATION_ID)
    return envelope.to_dict()


@router.get("/tokens/known")
async def get_known_tokens() -> List[Dict[str, Any]]:
    """Static token table used to resolve natural-language symbols"""
    return OKXDexTool.known_tokens()
