"""
API module for Campaign Studio
"""

from .connection_manager import ConnectionManager
from .websocket_handler import websocket_endpoint, get_executor

__all__ = ["ConnectionManager", "websocket_endpoint", "get_executor"]
