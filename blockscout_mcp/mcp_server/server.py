"""
MCP server exposing the Blockscout explorer API as tools.

Tools are generated from the operation table; each call returns the explorer's
JSON response pretty-printed as a single text block. Failures are reported as
tool errors carrying the exception message.
"""

from typing import Any, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from blockscout_mcp import __version__
from blockscout_mcp.tools import SERVER_INSTRUCTIONS, OnChainData, to_text
from blockscout_mcp.utils.logger import get_logger

logger = get_logger(__name__)

SERVER_NAME = "blockscout-mcp"


def create_server(tools: Optional[OnChainData] = None) -> Server:
    """
    Builds the MCP server.

    Args:
        tools (Optional[OnChainData]): Tool catalogue. A default one is created when omitted.

    Returns:
        Server: The configured low-level MCP server.
    """
    tools = tools if tools is not None else OnChainData()
    server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [
            Tool(
                name=tool["name"],
                description=tool["description"],
                inputSchema=tool["input_schema"],
            )
            for tool in tools.list_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Any) -> List[TextContent]:
        if arguments is not None and not isinstance(arguments, dict):
            raise ValueError("Invalid arguments. Expected an object.")

        result = await tools.call_tool(name, arguments or {})
        return [TextContent(type="text", text=to_text(result))]

    return server


async def run_stdio(tools: Optional[OnChainData] = None) -> None:
    """Serves MCP over stdin/stdout until the client disconnects."""
    tools = tools if tools is not None else OnChainData()
    server = create_server(tools)
    logger.info(f"Starting {SERVER_NAME} {__version__} on stdio")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await tools.api.aclose()
        logger.info(f"{SERVER_NAME} stopped")
