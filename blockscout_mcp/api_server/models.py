"""
Pydantic models for HTTP request/response validation.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToolInfo(BaseModel):
    """
    Describes one tool.

    Attributes:
        name (str): Tool name.
        description (str): What the tool returns.
        input_schema (Dict[str, Any]): JSON schema of the tool arguments.
    """
    name: str
    description: str
    input_schema: Dict[str, Any]


class ToolListResponse(BaseModel):
    tools: List[ToolInfo]
    total: int


class ToolCallResponse(BaseModel):
    """
    Result of a tool call.

    Attributes:
        tool (str): Tool name.
        result (Any): The explorer's JSON response, unchanged.
    """
    tool: str
    result: Any


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
    status_code: Optional[int] = Field(None, description="Explorer status code, when there was one")
