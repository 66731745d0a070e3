"""
FastAPI server for Campaign Studio with WebSocket support
"""

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from campaign_studio.api import websocket_endpoint
from campaign_studio.utils.settings import get_playback_settings

settings = get_playback_settings()

app = FastAPI(title="Campaign Studio API")

# CORS middleware for the web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": "Campaign Studio API", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.websocket("/ws/{client_id}")
async def websocket_route(websocket: WebSocket, client_id: str):
    """
    WebSocket endpoint for compiling campaigns and streaming them back
    """
    await websocket_endpoint(websocket, client_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True)
