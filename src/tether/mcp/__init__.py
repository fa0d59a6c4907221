"""MCP (Model Context Protocol) client plumbing."""

from tether.mcp.session import McpSession, open_session, result_text

__all__ = ["McpSession", "open_session", "result_text"]
