"""
MCP tool surface.
"""

from blockscout_mcp.mcp_server.server import create_server, run_stdio

__all__ = ['create_server', 'run_stdio']
