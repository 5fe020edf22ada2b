"""
Content Suggestion Generator

Builds a prompt from the user's onboarding profile and inspirations, asks the
chat model for three LinkedIn post ideas and stores them as the user's active
suggestions.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from openai import OpenAI, OpenAIError
from psycopg2.extras import Json

from .. import config
from ..core.logging_config import get_logger
from ..errors import SuggestionGenerationError

logger = get_logger(__name__)

SYSTEM_PROMPT = 'You are a professional content strategist. Always respond with valid JSON only.'
SUGGESTION_COUNT = 3
TEMPERATURE = 0.7
MAX_TOKENS = 1500

PROFILE_CONTEXT_FIELDS = [
    'linkedin_data', 'goals', 'content_guides', 'pacing_preferences', 'content_pillars',
    'linkedin_name', 'linkedin_headline', 'linkedin_about', 'linkedin_company',
]

_CODE_FENCE = re.compile(r'```(?:json)?\s*(.*?)```', re.DOTALL)


def build_user_context(profile: Dict[str, Any], inspirations: List[Dict[str, Any]],
                       recent_topics: Optional[List[str]] = None) -> Dict[str, Any]:
    """The JSON-serializable context stored alongside each suggestion"""
    return {
        'profile': {field: profile.get(field) for field in PROFILE_CONTEXT_FIELDS},
        'inspirations': [
            {
                'name': item.get('name'),
                'company': item.get('company'),
                'headline': item.get('headline'),
                'about': item.get('about'),
            }
            for item in inspirations or []
        ],
        'recent_conversations': [{'title': title} for title in recent_topics or []],
    }


def _or_na(value: Any) -> str:
    if value is None or value == '' or value == [] or value == {}:
        return 'N/A'
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def build_prompt(context: Dict[str, Any]) -> str:
    profile = context.get('profile') or {}
    content_guides = profile.get('content_guides') or {}

    inspirations = '\n'.join(
        f"- {item.get('name') or 'Unknown'} at {item.get('company') or 'N/A'}: {item.get('headline') or 'N/A'}"
        for item in context.get('inspirations') or []
    ) or 'None'

    recent_topics = '\n'.join(
        f"- {item['title']}" for item in context.get('recent_conversations') or []
    ) or 'None'

    return f"""You are a content strategy expert. Based on the following user context, generate {SUGGESTION_COUNT} personalized content suggestions that would be valuable for their professional growth and audience engagement.

User Profile:
- Name: {_or_na(profile.get('linkedin_name'))}
- Headline: {_or_na(profile.get('linkedin_headline'))}
- Company: {_or_na(profile.get('linkedin_company'))}
- About: {_or_na(profile.get('linkedin_about'))}
- Goals: {_or_na(profile.get('goals'))}
- Content Guides: {_or_na(content_guides.get('guides'))}
- Content Pillars: {_or_na(profile.get('content_pillars'))}
- Writing Format: {_or_na(content_guides.get('writing_format'))}

Inspirations (people they admire):
{inspirations}

Recent topics:
{recent_topics}

Generate exactly {SUGGESTION_COUNT} content suggestions. For each suggestion, provide:
1. A compelling title (max 80 characters)
2. A brief description (max 150 characters)
3. A detailed outline with key points to cover

Format your response as a JSON array with this structure:
[
  {{
    "title": "Content title here",
    "description": "Brief description here",
    "outline": "Detailed outline with key points, structure, and approach"
  }}
]

Make suggestions relevant to their industry, goals, and inspired by their role models' content style."""


def parse_suggestions(text: Optional[str]) -> List[Dict[str, str]]:
    """
    Parse the model's reply into a list of {title, description, outline}.

    Accepts a bare JSON array, an array inside a ```json fence, or an object
    with a "suggestions" array.
    """
    if not text or not text.strip():
        raise SuggestionGenerationError('Invalid AI response format')

    body = text.strip()
    try:
        data = json.loads(body)
    except ValueError:
        fenced = _CODE_FENCE.search(body)
        if not fenced:
            logger.error(f"Failed to parse AI response: {text[:200]}")
            raise SuggestionGenerationError('Invalid AI response format')
        try:
            data = json.loads(fenced.group(1).strip())
        except ValueError:
            logger.error(f"Failed to parse AI response: {text[:200]}")
            raise SuggestionGenerationError('Invalid AI response format')

    if isinstance(data, dict):
        data = data.get('suggestions')

    if not isinstance(data, list) or not data:
        raise SuggestionGenerationError('Invalid AI response format')

    suggestions = []
    for item in data:
        if not isinstance(item, dict) or not str(item.get('title') or '').strip():
            raise SuggestionGenerationError('Invalid AI response format')
        suggestions.append({
            'title': str(item['title']).strip(),
            'description': str(item.get('description') or ''),
            'outline': _outline_text(item.get('outline')),
        })
    return suggestions


def _outline_text(outline: Any) -> str:
    # Models sometimes return the outline as a list of points
    if isinstance(outline, list):
        return '\n'.join(str(point) for point in outline if point)
    return str(outline or '')


def _serialize_row(row) -> Dict[str, Any]:
    suggestion = dict(row)
    created_at = suggestion.get('created_at')
    if isinstance(created_at, datetime):
        suggestion['created_at'] = created_at.isoformat()
    return suggestion


class SuggestionStore:
    """The `content_suggestions` table; one active batch per user"""

    def __init__(self, get_db_connection: Callable):
        self.get_db_connection = get_db_connection

    def list_active(self, user_id: int) -> List[Dict[str, Any]]:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT id, title, description, suggested_outline, created_at
                FROM content_suggestions
                WHERE user_id = %s AND is_active = TRUE
                ORDER BY created_at DESC, id ASC
            ''', (user_id,))
            return [_serialize_row(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def replace_active(self, user_id: int, suggestions: List[Dict[str, str]],
                       context: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Deactivate the old batch and insert the new one in a single transaction"""
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'UPDATE content_suggestions SET is_active = FALSE WHERE user_id = %s AND is_active = TRUE',
                (user_id,)
            )

            rows = []
            for suggestion in suggestions:
                cursor.execute('''
                    INSERT INTO content_suggestions
                        (user_id, title, description, suggested_outline, context_used)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING id, title, description, suggested_outline, created_at
                ''', (
                    user_id,
                    suggestion['title'],
                    suggestion['description'],
                    suggestion['outline'],
                    Json(context),
                ))
                rows.append(_serialize_row(cursor.fetchone()))

            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

        return rows


class ContentSuggestionGenerator:
    """Generates and stores content suggestions for one user at a time"""

    def __init__(self, profile_store, inspiration_store, suggestion_store: SuggestionStore,
                 client: OpenAI = None, model: str = None):
        self.profile_store = profile_store
        self.inspiration_store = inspiration_store
        self.suggestion_store = suggestion_store
        self.model = model or config.OPENAI_MODEL
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not config.OPENAI_API_KEY:
                raise SuggestionGenerationError('OpenAI API key not configured')
            self._client = OpenAI(api_key=config.OPENAI_API_KEY)
        return self._client

    def generate(self, user_id: int) -> Dict[str, Any]:
        """
        Generate a fresh batch of suggestions for the user.

        Raises:
            ProfileNotFoundError: the user has no profile row
            SuggestionGenerationError: the model call failed or its reply was unusable
        """
        profile = self.profile_store.get_profile(user_id)
        inspirations = self.inspiration_store.list_inspirations(user_id)

        # Previous titles steer the model away from repeating itself
        recent_topics = [item['title'] for item in self.suggestion_store.list_active(user_id)][:5]

        context = build_user_context(profile, inspirations, recent_topics)
        prompt = build_prompt(context)

        logger.info(f"Generating content suggestions for user {user_id}")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': prompt}
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API error for user {user_id}: {e}")
            raise SuggestionGenerationError('Failed to generate suggestions')

        suggestions = parse_suggestions(response.choices[0].message.content)
        rows = self.suggestion_store.replace_active(user_id, suggestions, context)

        logger.info(f"Saved {len(rows)} content suggestions for user {user_id}")
        return {
            'suggestions': rows,
            'generated_at': datetime.now(timezone.utc).isoformat(),
        }
