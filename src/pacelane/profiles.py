"""
Profile preference storage

Each onboarding step writes one or two columns of the user's `profiles` row.
Validation is limited to "is this field empty / is this a known option"; a
failed check raises ValidationError with a message meant for the user.
"""

import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from psycopg2.extras import Json

from .core.data_safety import DataEncryption
from .core.logging_config import get_logger
from .errors import ProfileNotFoundError, ValidationError
from .onboarding import catalog
from .onboarding.linkedin_parser import format_linkedin_url, parse_linkedin_input

logger = get_logger(__name__)

# E.164 allows at most 15 digits
MIN_PHONE_DIGITS = 8
MAX_PHONE_DIGITS = 15

# Columns a step may write; anything else is a programming error
WRITABLE_COLUMNS = {
    'linkedin_profile', 'linkedin_username', 'linkedin_data', 'linkedin_name',
    'linkedin_headline', 'linkedin_company', 'linkedin_about', 'linkedin_scraped_at',
    'whatsapp_number_encrypted', 'pacing_preferences', 'goals', 'target_audiences',
    'content_guides', 'content_pillars', 'onboarding_completed',
}


def clean_whatsapp_number(dial_code: Optional[str], number: Optional[str]) -> str:
    """
    Normalize a phone number to +<digits>.

    A number typed with its own leading '+' ignores the selected dial code.
    """
    number = (number or '').strip()
    if not number:
        return ''

    if number.startswith('+'):
        return '+' + re.sub(r'\D', '', number)

    dial_digits = re.sub(r'\D', '', dial_code or '')
    return '+' + dial_digits + re.sub(r'\D', '', number)


def mask_whatsapp_number(number: Optional[str]) -> str:
    """Show only the first and last two digits of a stored number"""
    if not number:
        return ''
    digits = re.sub(r'\D', '', number)
    if len(digits) <= 4:
        return number
    return '+' + digits[:2] + '*' * (len(digits) - 4) + digits[-2:]


def _clean_list(values: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop empties, de-duplicate keeping order"""
    result = []
    for value in values or []:
        value = (value or '').strip()
        if value and value not in result:
            result.append(value)
    return result


class ProfileStore:
    """Reads and writes the `profiles` table through a connection factory"""

    def __init__(self, get_db_connection: Callable, encryption: DataEncryption = None):
        self.get_db_connection = get_db_connection
        self.encryption = encryption or DataEncryption()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def ensure_profile(self, user_id: int) -> None:
        """Create an empty profile row for a new user"""
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO profiles (user_id) VALUES (%s)
                ON CONFLICT (user_id) DO NOTHING
            ''', (user_id,))
            conn.commit()
        finally:
            conn.close()

    def get_profile(self, user_id: int) -> Dict[str, Any]:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT * FROM profiles WHERE user_id = %s', (user_id,))
            row = cursor.fetchone()
        finally:
            conn.close()

        if not row:
            raise ProfileNotFoundError(user_id)
        return self._row_to_profile(row)

    def _row_to_profile(self, row) -> Dict[str, Any]:
        profile = dict(row)
        encrypted = profile.pop('whatsapp_number_encrypted', None)
        profile['whatsapp_number'] = self.encryption.decrypt_sensitive_data(encrypted)
        profile['content_guides'] = profile.get('content_guides') or {}
        return profile

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _update(self, user_id: int, values: Dict[str, Any], merge_guides: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Write the given columns and return the updated profile.

        merge_guides is merged into the content_guides JSONB object so that
        saving guides keeps the writing format and vice versa.
        """
        unknown = set(values) - WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Not writable profile columns: {sorted(unknown)}")

        assignments = [f"{column} = %s" for column in values]
        params = list(values.values())

        if merge_guides is not None:
            assignments.append("content_guides = COALESCE(content_guides, '{}'::jsonb) || %s::jsonb")
            params.append(Json(merge_guides))

        assignments.append("updated_at = CURRENT_TIMESTAMP")
        params.append(user_id)

        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE profiles SET {', '.join(assignments)} WHERE user_id = %s RETURNING *",
                tuple(params)
            )
            row = cursor.fetchone()
            if not row:
                conn.rollback()
                raise ProfileNotFoundError(user_id)
            conn.commit()
        finally:
            conn.close()

        return self._row_to_profile(row)

    def save_linkedin_profile(self, user_id: int, raw_input: str) -> Dict[str, Any]:
        """Store the LinkedIn profile from a pasted URL or username"""
        if not raw_input or not raw_input.strip():
            raise ValidationError('LinkedIn profile URL is required', field='linkedin_profile')

        parsed = parse_linkedin_input(raw_input)
        if not parsed.is_valid:
            raise ValidationError('Please enter a valid LinkedIn profile URL or username',
                                  field='linkedin_profile')

        profile = self._update(user_id, {
            'linkedin_profile': format_linkedin_url(parsed.username),
            'linkedin_username': parsed.username,
        })
        logger.info(f"Saved LinkedIn profile for user {user_id}")
        return profile

    def save_linkedin_data(self, user_id: int, scraped: Dict[str, Any]) -> Dict[str, Any]:
        """Store scraped LinkedIn data and the summary fields derived from it"""
        profile = self._update(user_id, {
            'linkedin_data': Json(scraped),
            'linkedin_name': scraped.get('full_name'),
            'linkedin_headline': scraped.get('headline'),
            'linkedin_company': scraped.get('current_company'),
            'linkedin_about': scraped.get('summary'),
            'linkedin_scraped_at': datetime.now(timezone.utc),
        })
        logger.info(f"Saved scraped LinkedIn data for user {user_id}")
        return profile

    def update_linkedin_summary(self, user_id: int, name: str, headline: str,
                                company: str, about: str) -> Dict[str, Any]:
        """Save the user's corrections from the profile review step"""
        name = (name or '').strip()
        if not name:
            raise ValidationError('Please enter your name', field='linkedin_name')

        return self._update(user_id, {
            'linkedin_name': name,
            'linkedin_headline': (headline or '').strip() or None,
            'linkedin_company': (company or '').strip() or None,
            'linkedin_about': (about or '').strip() or None,
        })

    def save_whatsapp_number(self, user_id: int, dial_code: str, number: str) -> Dict[str, Any]:
        cleaned = clean_whatsapp_number(dial_code, number)
        digit_count = len(cleaned) - 1
        if not cleaned or not (MIN_PHONE_DIGITS <= digit_count <= MAX_PHONE_DIGITS):
            raise ValidationError('Please enter a valid WhatsApp number', field='whatsapp_number')

        profile = self._update(user_id, {
            'whatsapp_number_encrypted': self.encryption.encrypt_sensitive_data(cleaned),
        })
        logger.info(f"Saved WhatsApp number for user {user_id}")
        return profile

    def save_pacing_preferences(self, user_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        intensity = data.get('intensity')
        if not intensity:
            raise ValidationError('Please select an intensity level', field='intensity')
        if intensity not in catalog.INTENSITY_OPTIONS:
            raise ValidationError('Please select a valid intensity level', field='intensity')

        days = set(data.get('frequency') or [])
        if not days:
            raise ValidationError('Please select at least one day', field='frequency')
        unknown_days = days - set(catalog.DAY_IDS)
        if unknown_days:
            raise ValidationError('Please select valid days of the week', field='frequency')

        choices = {
            'daily_summary_time': catalog.DAILY_SUMMARY_TIMES,
            'followups_frequency': catalog.FOLLOWUP_FREQUENCIES,
            'recommendations_time': catalog.RECOMMENDATION_TIMES,
            'context_sessions_time': catalog.CONTEXT_SESSION_TIMES,
        }

        pacing = {
            'intensity': intensity,
            'frequency': [day for day in catalog.DAY_IDS if day in days],
        }
        for key, options in choices.items():
            value = data.get(key) or catalog.PACING_DEFAULTS[key]
            if value not in options:
                raise ValidationError(f"Please select a valid option for {key.replace('_', ' ')}", field=key)
            pacing[key] = value

        profile = self._update(user_id, {'pacing_preferences': Json(pacing)})
        logger.info(f"Saved pacing preferences for user {user_id}: {pacing['intensity']}")
        return profile

    def save_goals(self, user_id: int, goals: List[str], target_audiences: List[str] = None) -> Dict[str, Any]:
        goals = _clean_list(goals)
        if not goals:
            raise ValidationError('Please select at least one goal', field='goals')
        if any(goal not in catalog.GOAL_OPTIONS for goal in goals):
            raise ValidationError('Please select goals from the list', field='goals')

        return self._update(user_id, {
            'goals': Json(goals),
            'target_audiences': Json(_clean_list(target_audiences)),
        })

    def save_content_guides(self, user_id: int, guides: List[str]) -> Dict[str, Any]:
        guides = _clean_list(guides)
        if not guides:
            raise ValidationError('Please add at least one guide', field='guides')

        return self._update(user_id, {}, merge_guides={'guides': guides})

    def save_content_pillars(self, user_id: int, themes: List[str], content_types: List[str]) -> Dict[str, Any]:
        """Themes (free text) come first, followed by the selected content types"""
        selected = _clean_list(content_types)
        allowed = set(catalog.CONTENT_TYPE_OPTIONS) | set(catalog.ALL_PILLAR_OPTIONS)
        if any(item not in allowed for item in selected):
            raise ValidationError('Please select content types from the list', field='content_types')

        pillars = _clean_list(list(themes or []) + selected)
        if not pillars:
            raise ValidationError('Please select at least one content pillar', field='content_pillars')

        return self._update(user_id, {'content_pillars': Json(pillars)})

    def save_writing_format(self, user_id: int, writing_format: str) -> Dict[str, Any]:
        writing_format = writing_format or catalog.DEFAULT_WRITING_FORMAT
        if writing_format not in catalog.WRITING_FORMATS:
            raise ValidationError('Please select a writing format', field='writing_format')

        return self._update(user_id, {}, merge_guides={'writing_format': writing_format})

    def complete_onboarding(self, user_id: int) -> Dict[str, Any]:
        profile = self._update(user_id, {'onboarding_completed': True})
        logger.info(f"User {user_id} completed onboarding")
        return profile
