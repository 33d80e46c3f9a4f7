"""MCP server for chunkscan."""

from chunkscan.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
