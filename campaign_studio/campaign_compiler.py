"""
Campaign Compiler

Main orchestration class for turning a campaign prompt into a payload and
its explanation.
"""

from typing import Iterable

from .workflow import build_workflow


class CampaignCompiler:
    """Main campaign compile orchestrator"""
    
    def __init__(self):
        # Build the workflow graph
        self.workflow = build_workflow()
    
    def run(
        self,
        user_prompt: str,
        data_sources: Iterable[str] = (),
        channels: Iterable[str] = ()
    ) -> dict:
        """
        Run the campaign compile workflow
        
        Args:
            user_prompt: Campaign description from user
            data_sources: Data sources selected by the user
            channels: Channels selected by the user
        
        Returns:
            Final workflow state with "payload" and "explanation"
        """
        initial_state = {
            "user_prompt": user_prompt,
            "selected_data_sources": list(data_sources),
            "selected_channels": list(channels),
            "attributes": None,
            "payload": None,
            "explanation": "",
            "current_step": "classify_prompt"
        }
        
        # Execute workflow
        final_state = self.workflow.invoke(initial_state)
        return final_state
