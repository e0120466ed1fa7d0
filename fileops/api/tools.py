"""Tool catalog and invocation endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends

from fileops.dependencies import get_tool_dispatcher, verify_token
from fileops.models.tools import ToolCallRequest, ToolCallResponse, ToolListResponse

if TYPE_CHECKING:
    from fileops.services.tools import ToolDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/tools", tags=["tools"], dependencies=[Depends(verify_token)])


@router.get("", response_model=ToolListResponse, response_model_by_alias=True)
async def list_tools(
    dispatcher: ToolDispatcher = Depends(get_tool_dispatcher),
) -> ToolListResponse:
    """List every tool with its JSON input schema."""
    return ToolListResponse(tools=dispatcher.list_tools())


@router.post("/call", response_model=ToolCallResponse, response_model_by_alias=True)
async def call_tool(
    request: ToolCallRequest,
    dispatcher: ToolDispatcher = Depends(get_tool_dispatcher),
) -> ToolCallResponse:
    """
    Invoke a tool.

    Tool failures are reported inside the envelope (isError=true) with a 200
    status; HTTP errors are reserved for authentication and malformed bodies.
    """
    logger.debug(
        "Tool call received",
        extra={"requested_tool": request.name, "argument_keys": sorted(request.arguments)},
    )
    return await dispatcher.call_tool(request.name, request.arguments)
