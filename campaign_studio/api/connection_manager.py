"""
WebSocket session registry: one socket and one facet selection per client
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
from fastapi import WebSocket


@dataclass
class ClientSession:
    websocket: WebSocket
    data_sources: list[str] = field(default_factory=list)
    channels: list[str] = field(default_factory=list)


class ConnectionManager:
    """Tracks connected clients and routes outgoing messages to them"""

    def __init__(self):
        self.sessions: Dict[str, ClientSession] = {}

    async def connect(self, client_id: str, websocket: WebSocket):
        """Accept the socket; a reconnecting client starts with an empty facet selection"""
        await websocket.accept()
        self.sessions[client_id] = ClientSession(websocket)
        print(f"Client {client_id} connected")

    def disconnect(self, client_id: str):
        self.sessions.pop(client_id, None)
        print(f"Client {client_id} disconnected")

    async def send_message(self, client_id: str, message: dict):
        """
        Send a JSON message to one client

        Messages for clients that already left are dropped, so a playback
        finishing after a disconnect does not fail.
        """
        session = self.sessions.get(client_id)
        if session is not None:
            await session.websocket.send_json(message)

    def set_facets(self, client_id: str, data_sources: list[str], channels: list[str]):
        """
        Remember the client's data source and channel selection

        Args:
            client_id: Client identifier
            data_sources: Selected data sources
            channels: Selected channels
        """
        session = self.sessions.get(client_id)
        if session is None:
            return
        session.data_sources = list(data_sources)
        session.channels = list(channels)
        print(f"Facets stored for client {client_id}: {len(data_sources)} source(s), {len(channels)} channel(s)")

    def get_facets(self, client_id: str) -> Optional[dict]:
        """
        Returns:
            {"data_sources": [...], "channels": [...]} or None for an unknown client
        """
        session = self.sessions.get(client_id)
        if session is None:
            return None
        return {"data_sources": session.data_sources, "channels": session.channels}
