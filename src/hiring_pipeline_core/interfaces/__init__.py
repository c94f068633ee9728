"""Public interface re-exports for hiring_pipeline_core."""

from hiring_pipeline_core.interfaces.messaging import ChatClient, EmailClient
from hiring_pipeline_core.interfaces.scraper import ProfileScraper

__all__ = [
    "ChatClient",
    "EmailClient",
    "ProfileScraper",
]
