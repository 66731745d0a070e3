"""
Entry point for campaign studio application
"""

import asyncio
import signal

from campaign_studio.campaign_compiler import CampaignCompiler
from campaign_studio.constants import get_facets_list, validate_facets
from campaign_studio.streaming import (
    CancellationToken,
    ConversationStore,
    JsonFileCheckpointStore,
    PlaybackController,
    PlaybackState,
)
from campaign_studio.streaming.conversation_store import stream_token_of
from campaign_studio.utils.settings import get_playback_settings

CLI_CONVERSATION_ID = "cli"


def make_printer():
    """Print each snapshot's new text only"""
    printed = {}
    
    async def publish(snapshot):
        token = stream_token_of(snapshot.id)
        seen = printed.get(token, 0)
        print(snapshot.content[seen:], end="", flush=True)
        printed[token] = len(snapshot.content)
        if not snapshot.streaming:
            print("\n")
    
    return publish


async def run_playback(start):
    """Run a playback; Ctrl-C pauses it instead of killing the process"""
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.stop)
    except NotImplementedError:
        print("(Ctrl-C pausing is not supported on this platform)")
    try:
        return await start(token)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except NotImplementedError:
            pass


def read_facets() -> tuple[list[str], list[str]]:
    print("\nOptional facet selection (comma separated, Enter to skip):")
    print(get_facets_list())
    data_sources = [s.strip() for s in input("Data sources: ").split(",") if s.strip()]
    channels = [c.strip() for c in input("Channels: ").split(",") if c.strip()]
    
    is_valid, invalid = validate_facets(data_sources, channels)
    if not is_valid:
        print(f"✗ Ignoring unknown facets: {', '.join(invalid)}")
    return data_sources, channels


def main():
    """Main CLI entry point"""
    print("=" * 80)
    print("Campaign Studio - Prompt to Campaign Payload")
    print("=" * 80)
    
    settings = get_playback_settings()
    controller = PlaybackController.from_settings(
        settings,
        JsonFileCheckpointStore(settings.checkpoint_dir),
        ConversationStore()
    )
    
    result = None
    checkpoint = controller.select_conversation(CLI_CONVERSATION_ID)
    if checkpoint:
        print(f"\nA paused campaign was found: \"{checkpoint.original_input}\"")
        answer = input("Resume it? [Y/n]: ").strip().lower()
        if answer in ("", "y", "yes"):
            if checkpoint.partial_explanation_text or checkpoint.explanation_token:
                print(checkpoint.partial_json_text + "\n")
            result = asyncio.run(run_playback(
                lambda token: controller.resume(CLI_CONVERSATION_ID, token=token, publish=make_printer())
            ))
        else:
            controller.discard(CLI_CONVERSATION_ID)
    
    if result is None:
        print("\n" + "=" * 80)
        print("Describe your campaign (or press Enter for default example):")
        print("=" * 80)
        user_input = input("Prompt: ").strip()
        
        if not user_input:
            user_input = "Flash sale 20% off for repeat customers, email and sms, discount code: SAVE20"
            print(f"\nUsing example prompt: {user_input}")
        
        data_sources, channels = read_facets()
        
        compiler = CampaignCompiler()
        state = compiler.run(user_input, data_sources, channels)
        
        print("\n" + "=" * 80)
        print("Streaming campaign (Ctrl-C to pause)")
        print("=" * 80 + "\n")
        
        result = asyncio.run(run_playback(
            lambda token: controller.play(
                CLI_CONVERSATION_ID, state["payload"], user_input,
                token=token, publish=make_printer(), explanation=state["explanation"]
            )
        ))
    
    if result.state == PlaybackState.PAUSED:
        print("\n\n⏸ Paused. Run again to resume.")
    elif result.state == PlaybackState.COMPLETED:
        print("✓ Campaign complete")


if __name__ == "__main__":
    main()
