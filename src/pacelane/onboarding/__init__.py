"""
Onboarding Submodule

The onboarding wizard: step sequence, option catalog, LinkedIn input parsing
and profile scraping. Routes live in pacelane.onboarding.routes.
"""

from .linkedin_parser import (
    format_linkedin_url,
    get_linkedin_display_info,
    is_linkedin_url,
    is_valid_linkedin_username,
    parse_linkedin_input,
)
from .linkedin_scraper import LinkedInScraper

__all__ = [
    'LinkedInScraper',
    'format_linkedin_url',
    'get_linkedin_display_info',
    'is_linkedin_url',
    'is_valid_linkedin_username',
    'parse_linkedin_input',
]
