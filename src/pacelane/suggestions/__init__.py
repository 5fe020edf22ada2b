"""
Content suggestions

LLM-generated LinkedIn post ideas built from the onboarding profile.
"""

from .generator import (
    ContentSuggestionGenerator,
    SuggestionStore,
    build_prompt,
    build_user_context,
    parse_suggestions,
)
from .routes import add_suggestion_routes

__all__ = [
    'ContentSuggestionGenerator',
    'SuggestionStore',
    'add_suggestion_routes',
    'build_prompt',
    'build_user_context',
    'parse_suggestions',
]
