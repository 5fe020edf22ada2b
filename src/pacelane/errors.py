"""Exceptions raised by the onboarding stores and the suggestion generator."""


class PacelaneError(Exception):
    """Base class for application errors"""


class ValidationError(PacelaneError):
    """A submitted field is empty or invalid. The message is shown to the user."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ProfileNotFoundError(PacelaneError):
    """No profile row exists for the user"""

    def __init__(self, user_id):
        super().__init__(f"Profile not found for user {user_id}")
        self.user_id = user_id


class StorageError(PacelaneError):
    """Object storage upload, download or delete failed"""


class SuggestionGenerationError(PacelaneError):
    """The LLM call failed or returned an unusable answer"""
