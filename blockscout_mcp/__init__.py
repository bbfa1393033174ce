"""
blockscout-mcp

Exposes the Blockscout explorer REST API of any chain as MCP tools.
"""

__version__ = "0.1.0"
