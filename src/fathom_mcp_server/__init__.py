"""Fathom MCP Server package.

This package exposes the Fathom meeting-intelligence API (meetings,
transcripts, summaries, action items, teams, webhooks) as a set of MCP
tools, and can render meetings into markdown files on disk.

Layers:
- `client`: async REST client with cursor-following pagination.
- `utils.markdown_export`: pure markdown formatting of API records.
- `tools`: plain async tool functions, testable without the runtime.
- `server`: FastMCP registration and process entrypoint.

Usage example:
    from fathom_mcp_server.server import main
    if __name__ == "__main__":
        main()
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
