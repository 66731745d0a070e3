"""
WebSocket endpoint handlers for campaign compilation and playback
"""

from fastapi import WebSocket, WebSocketDisconnect
import asyncio
from typing import Optional

from .connection_manager import ConnectionManager
from ..constants import validate_facets
from ..workflows.executor import CampaignExecutor

# Global connection manager
manager = ConnectionManager()

# Global workflow executor, created on first use
executor: Optional[CampaignExecutor] = None

# Background playback tasks per client
playback_tasks: dict[str, asyncio.Task] = {}


def get_executor() -> CampaignExecutor:
    global executor
    if executor is None:
        executor = CampaignExecutor()
    return executor


def _start_playback(client_id: str, coro):
    # Playback runs in the background so the receive loop can still see "stop"
    task = asyncio.create_task(coro)
    playback_tasks[client_id] = task

    def _forget(done: asyncio.Task):
        if playback_tasks.get(client_id) is done:
            del playback_tasks[client_id]

    task.add_done_callback(_forget)


async def websocket_endpoint(websocket: WebSocket, client_id: str):
    """
    Main WebSocket endpoint for client connections
    
    Args:
        websocket: WebSocket connection
        client_id: Unique client identifier
    """
    await manager.connect(client_id, websocket)
    campaign_executor = get_executor()
    
    # Send welcome message
    await manager.send_message(client_id, {
        "type": "assistant",
        "message": "Describe your campaign idea and I'll compile it into a campaign payload.",
        "timestamp": asyncio.get_event_loop().time()
    })
    
    try:
        while True:
            # Receive message from client
            data = await websocket.receive_json()
            message_type = data.get("type")
            
            if message_type == "handshake":
                # Store the data source and channel selection
                data_sources = data.get("data_sources", [])
                channels = data.get("channels", [])
                
                is_valid, invalid = validate_facets(data_sources, channels)
                if not is_valid:
                    await manager.send_message(client_id, {
                        "type": "error",
                        "message": f"Unknown data sources or channels ignored: {', '.join(invalid)}",
                        "timestamp": asyncio.get_event_loop().time(),
                        "disable_input": False
                    })
                manager.set_facets(client_id, data_sources, channels)
            
            elif message_type == "select_conversation":
                conversation_id = data.get("conversation_id", "")
                state = campaign_executor.select_conversation(client_id, conversation_id)
                
                await manager.send_message(client_id, {
                    "type": "playback_state",
                    "state": state.value,
                    "conversation_id": conversation_id,
                    "timestamp": asyncio.get_event_loop().time(),
                    "disable_input": False
                })
            
            elif message_type == "user_message":
                user_message = data.get("message", "")
                
                # Echo user message
                await manager.send_message(client_id, {
                    "type": "user",
                    "message": user_message,
                    "timestamp": asyncio.get_event_loop().time()
                })
                
                # Registered before the task runs so a "stop" right behind this message reaches it
                token = campaign_executor.track_token(client_id)
                _start_playback(client_id, campaign_executor.process_campaign(client_id, user_message, manager, token))
            
            elif message_type == "stop":
                campaign_executor.stop(client_id)
            
            elif message_type == "resume":
                token = campaign_executor.track_token(client_id)
                _start_playback(client_id, campaign_executor.resume_campaign(client_id, manager, token))
            
            elif message_type == "stop_all":
                # Global stop: cancels every running playback without keeping checkpoints
                campaign_executor.stop_all()
            
            elif message_type == "reset":
                # Reset the conversation
                campaign_executor.reset_client_state(client_id)
                
                await manager.send_message(client_id, {
                    "type": "assistant",
                    "message": "All set! Let's start fresh. What campaign would you like to build?",
                    "timestamp": asyncio.get_event_loop().time()
                })
    
    except WebSocketDisconnect:
        # Pause anything still streaming so it can be resumed later
        campaign_executor.stop(client_id)
        manager.disconnect(client_id)
    except Exception as e:
        print(f"Error with client {client_id}: {e}")
        campaign_executor.stop(client_id)
        manager.disconnect(client_id)
