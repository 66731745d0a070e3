"""
Workflow executor for compiling campaigns and streaming them to clients
"""

import asyncio
from typing import Dict, Optional

from ..campaign_compiler import CampaignCompiler
from ..models import ChatMessage
from ..streaming import (
    CancellationToken,
    ConversationStore,
    JsonFileCheckpointStore,
    NoCheckpointError,
    PlaybackController,
    PlaybackError,
    PlaybackResult,
    PlaybackState,
)
from ..streaming.conversation_store import utc_timestamp
from ..utils.ids import monotonic_ms
from ..utils.settings import get_playback_settings


class CampaignExecutor:
    """
    Compiles campaign prompts and plays them back per client conversation
    """
    
    def __init__(
        self,
        controller: Optional[PlaybackController] = None,
        conversation_store: Optional[ConversationStore] = None,
        compiler: Optional[CampaignCompiler] = None
    ):
        self.conversation_store = conversation_store or (controller.conversation_store if controller else ConversationStore())
        
        if controller is None:
            settings = get_playback_settings()
            controller = PlaybackController.from_settings(
                settings,
                JsonFileCheckpointStore(settings.checkpoint_dir),
                self.conversation_store
            )
        self.controller = controller
        self.compiler = compiler or CampaignCompiler()
        
        # Current conversation per client
        self.client_conversations: Dict[str, str] = {}
        # Token of the request each client is running, registered before its first await
        self.client_tokens: Dict[str, CancellationToken] = {}
    
    def current_conversation(self, client_id: str) -> str:
        """Return the client's current conversation, starting one if needed"""
        if client_id not in self.client_conversations:
            self.client_conversations[client_id] = self.conversation_store.create_conversation()
        return self.client_conversations[client_id]
    
    def select_conversation(self, client_id: str, conversation_id: str) -> PlaybackState:
        """
        Switch the client to a conversation and report whether it has a paused playback
        
        Args:
            client_id: Client identifier
            conversation_id: Conversation to switch to
        
        Returns:
            PAUSED if a resumable checkpoint exists, otherwise the conversation's state
        """
        self.client_conversations[client_id] = conversation_id
        self.controller.select_conversation(conversation_id)
        return self.controller.state(conversation_id)
    
    async def process_campaign(
        self,
        client_id: str,
        message: str,
        connection_manager,
        token: Optional[CancellationToken] = None
    ):
        """
        Compile the user's campaign request and stream the result
        
        Args:
            client_id: Unique client identifier
            message: User's campaign request message
            connection_manager: ConnectionManager instance for sending messages
            token: Token from track_token; a new one is registered if omitted
        """
        token = token or self.track_token(client_id)
        
        try:
            await connection_manager.send_message(client_id, {
                "type": "assistant_thinking",
                "message": "Compiling your campaign request...",
                "timestamp": asyncio.get_event_loop().time(),
                "disable_input": True
            })
            
            conversation_id = self.current_conversation(client_id)
            facets = connection_manager.get_facets(client_id) or {}
            
            self.conversation_store.append(ChatMessage(
                id=f"user-{monotonic_ms()}",
                role="user",
                content=message,
                timestamp=utc_timestamp()
            ), conversation_id)
            
            state = self.compiler.run(
                message,
                facets.get("data_sources", []),
                facets.get("channels", [])
            )
            
            send_snapshot = self._snapshot_sender(client_id, connection_manager)
            result = await self.controller.play(
                conversation_id,
                state["payload"],
                message,
                token=token,
                publish=send_snapshot,
                explanation=state["explanation"]
            )
            await self._report_result(client_id, conversation_id, result, connection_manager)
        
        except PlaybackError as e:
            await self._send_error(client_id, str(e), connection_manager)
        except Exception as e:
            import traceback
            traceback.print_exc()
            await self._send_error(client_id, f"Error processing request: {str(e)}", connection_manager)
        finally:
            self._release_token(client_id, token)
    
    async def resume_campaign(self, client_id: str, connection_manager, token: Optional[CancellationToken] = None):
        """Resume the paused playback of the client's current conversation"""
        token = token or self.track_token(client_id)
        conversation_id = self.current_conversation(client_id)
        
        try:
            send_snapshot = self._snapshot_sender(client_id, connection_manager)
            result = await self.controller.resume(conversation_id, token=token, publish=send_snapshot)
            await self._report_result(client_id, conversation_id, result, connection_manager)
        except NoCheckpointError:
            await self._send_error(client_id, "There is no paused campaign to resume.", connection_manager)
        except PlaybackError as e:
            await self._send_error(client_id, str(e), connection_manager)
        except Exception as e:
            import traceback
            traceback.print_exc()
            await self._send_error(client_id, f"Error resuming playback: {str(e)}", connection_manager)
        finally:
            self._release_token(client_id, token)
    
    def stop(self, client_id: str) -> bool:
        """
        Pause the client's running request
        
        A stop that arrives while the request is still compiling is kept on
        its token, so playback pauses at its first character.
        """
        token = self.client_tokens.get(client_id)
        if token is None:
            return False
        token.stop()
        return True
    
    def stop_all(self):
        """Global stop: abort every client's request, keeping no checkpoints"""
        for token in list(self.client_tokens.values()):
            token.abort()
        self.controller.stop_all()
    
    def reset_client_state(self, client_id: str):
        """
        Drop any paused or running playback for the client and start a new conversation
        
        Args:
            client_id: Client identifier
        """
        token = self.client_tokens.pop(client_id, None)
        if token is not None:
            token.abort()
        conversation_id = self.client_conversations.pop(client_id, None)
        if conversation_id is not None:
            self.controller.discard(conversation_id)
        
        print(f"Reset state for client {client_id}")
    
    def track_token(self, client_id: str) -> CancellationToken:
        """Register the token of a request about to start so stop() can reach it"""
        token = CancellationToken()
        self.client_tokens[client_id] = token
        return token
    
    def _release_token(self, client_id: str, token: CancellationToken):
        if self.client_tokens.get(client_id) is token:
            del self.client_tokens[client_id]
    
    def _snapshot_sender(self, client_id: str, connection_manager):
        async def send_snapshot(snapshot: ChatMessage):
            await connection_manager.send_message(client_id, {
                "type": "snapshot",
                "artifact": "explanation" if snapshot.id.startswith("explanation-") else "payload",
                "id": snapshot.id,
                "message": snapshot.content,
                "streaming": snapshot.streaming,
                "timestamp": asyncio.get_event_loop().time(),
                "disable_input": True
            })
        return send_snapshot
    
    async def _report_result(self, client_id: str, conversation_id: str, result: PlaybackResult, connection_manager):
        if result.state == PlaybackState.COMPLETED:
            message = {"type": "assistant", "message": "✅ Campaign payload and strategy analysis are ready!"}
        elif result.state == PlaybackState.PAUSED:
            message = {"type": "playback_state", "state": "paused", "conversation_id": conversation_id,
                       "message": "Paused. Send **resume** to continue where you left off."}
        else:
            message = {"type": "system", "message": "Playback stopped."}
        
        message.update({
            "timestamp": asyncio.get_event_loop().time(),
            "disable_input": False
        })
        await connection_manager.send_message(client_id, message)
    
    async def _send_error(self, client_id: str, error: str, connection_manager):
        await connection_manager.send_message(client_id, {
            "type": "error",
            "message": error,
            "timestamp": asyncio.get_event_loop().time(),
            "disable_input": False
        })
