"""
MCP servers for Campaign Studio
"""
