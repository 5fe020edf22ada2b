"""
Background tasks

Suggestion generation runs here after onboarding completes so the final
wizard step does not wait on the LLM.
"""

from typing import Any, Dict

from .celery_config import celery_app
from .core.logging_config import get_logger
from .db import get_db_connection
from .errors import ProfileNotFoundError, SuggestionGenerationError
from .inspirations import InspirationStore
from .profiles import ProfileStore
from .suggestions.generator import ContentSuggestionGenerator, SuggestionStore

logger = get_logger(__name__)


def build_suggestion_generator() -> ContentSuggestionGenerator:
    return ContentSuggestionGenerator(
        profile_store=ProfileStore(get_db_connection),
        inspiration_store=InspirationStore(get_db_connection),
        suggestion_store=SuggestionStore(get_db_connection),
    )


@celery_app.task(bind=True, max_retries=3, default_retry_delay=60)
def generate_content_suggestions_task(self, user_id: int) -> Dict[str, Any]:
    """
    Generate the first batch of content suggestions for a user

    Args:
        user_id: User ID

    Returns:
        Dict with the number of suggestions saved
    """
    logger.info(f"Task {self.request.id}: generating suggestions for user {user_id}")

    try:
        result = build_suggestion_generator().generate(user_id)
    except ProfileNotFoundError:
        logger.error(f"Task {self.request.id}: no profile for user {user_id}")
        return {'success': False, 'error': 'Profile not found'}
    except SuggestionGenerationError as e:
        logger.warning(f"Task {self.request.id}: generation failed for user {user_id}, retrying: {e}")
        raise self.retry(exc=e)

    return {
        'success': True,
        'user_id': user_id,
        'count': len(result['suggestions']),
        'generated_at': result['generated_at'],
    }
