"""
Inspiration profiles

LinkedIn creators the user admires. Each one is scraped once when added;
a failed scrape still keeps the URL.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

import psycopg2
from psycopg2.extras import Json

from .core.logging_config import get_logger
from .errors import ValidationError
from .onboarding.linkedin_parser import format_linkedin_url, parse_linkedin_input
from .onboarding.linkedin_scraper import LinkedInScraper, scrape_error

logger = get_logger(__name__)

DUPLICATE_MESSAGE = 'This LinkedIn profile is already added'


class InspirationStore:
    """Reads and writes the `inspirations` table"""

    def __init__(self, get_db_connection: Callable):
        self.get_db_connection = get_db_connection

    def list_inspirations(self, user_id: int) -> List[Dict[str, Any]]:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                SELECT id, linkedin_url, name, company, headline, about, scraped_at, created_at
                FROM inspirations
                WHERE user_id = %s
                ORDER BY created_at DESC, id DESC
            ''', (user_id,))
            return [dict(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def add_inspiration(self, user_id: int, raw_url: str, scraper: LinkedInScraper) -> Dict[str, Any]:
        """
        Add an inspiration profile for the user.

        Returns the stored row plus `scraped` (bool) and `scrape_error`.
        """
        if not raw_url or not raw_url.strip():
            raise ValidationError('Please enter a LinkedIn profile URL', field='linkedin_url')

        parsed = parse_linkedin_input(raw_url)
        if not parsed.is_valid:
            raise ValidationError('Please enter a valid LinkedIn profile URL', field='linkedin_url')

        linkedin_url = format_linkedin_url(parsed.username)

        if self._exists(user_id, linkedin_url):
            raise ValidationError(DUPLICATE_MESSAGE, field='linkedin_url')

        scraped = scraper.scrape_profile(linkedin_url)
        error = scrape_error(scraped)
        if error:
            logger.warning(f"Could not scrape inspiration {parsed.username} for user {user_id}: {error}")
            scraped = None

        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO inspirations
                    (user_id, linkedin_url, linkedin_data, name, company, headline, about, scraped_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING id, linkedin_url, name, company, headline, about, scraped_at, created_at
            ''', (
                user_id,
                linkedin_url,
                Json(scraped) if scraped else None,
                scraped.get('full_name') if scraped else None,
                scraped.get('current_company') if scraped else None,
                scraped.get('headline') if scraped else None,
                scraped.get('summary') if scraped else None,
                datetime.now(timezone.utc) if scraped else None,
            ))
            row = cursor.fetchone()
            conn.commit()
        except psycopg2.IntegrityError:
            # Lost a race with a concurrent add of the same URL
            conn.rollback()
            raise ValidationError(DUPLICATE_MESSAGE, field='linkedin_url')
        finally:
            conn.close()

        logger.info(f"Added inspiration {parsed.username} for user {user_id}")

        inspiration = dict(row)
        inspiration['scraped'] = scraped is not None
        inspiration['scrape_error'] = error
        return inspiration

    def _exists(self, user_id: int, linkedin_url: str) -> bool:
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'SELECT 1 FROM inspirations WHERE user_id = %s AND linkedin_url = %s',
                (user_id, linkedin_url)
            )
            return cursor.fetchone() is not None
        finally:
            conn.close()

    def remove_inspiration(self, user_id: int, inspiration_id: int) -> bool:
        """Delete one of the user's inspirations; False if it was not theirs"""
        conn = self.get_db_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                'DELETE FROM inspirations WHERE id = %s AND user_id = %s',
                (inspiration_id, user_id)
            )
            deleted = cursor.rowcount > 0
            conn.commit()
        finally:
            conn.close()

        if deleted:
            logger.info(f"Removed inspiration {inspiration_id} for user {user_id}")
        return deleted
