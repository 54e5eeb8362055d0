"""Routers package."""

from ..dependencies import get_prompt_service, get_tool_service
from ..models import PromptCreate, PromptUpdate, RecordKind, ToolCreate, ToolUpdate
from .categories import router as categories_router
from .records import create_record_router

prompts_router = create_record_router(
    RecordKind.PROMPT, PromptCreate, PromptUpdate, get_prompt_service
)
tools_router = create_record_router(
    RecordKind.TOOL, ToolCreate, ToolUpdate, get_tool_service
)

__all__ = [
    "categories_router",
    "prompts_router",
    "tools_router",
]
