"""
Workflow module for campaign compilation and playback
"""

from .executor import CampaignExecutor

__all__ = ["CampaignExecutor"]
