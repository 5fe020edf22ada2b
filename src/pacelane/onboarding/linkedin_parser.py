"""
LinkedIn URL Parsing Utilities

Detects pasted LinkedIn profile URLs and extracts the username/handle from
them. Plain usernames are accepted as well.

    >>> parse_linkedin_input('https://www.linkedin.com/in/jane-doe?utm_source=share')
    LinkedInInput(username='jane-doe', is_url=True, original_input='https://www.linkedin.com/in/jane-doe?utm_source=share', is_valid=True)
"""

import re
from typing import Any, Dict, NamedTuple
from urllib.parse import unquote, urlsplit

USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9]([a-zA-Z0-9\-_]*[a-zA-Z0-9])?$')
PROFILE_PATH_PATTERNS = [
    re.compile(r'^/in/([^/?#]+)'),
    re.compile(r'^/pub/([^/?#]+)'),
]
URL_MARKERS = ('linkedin.com/in/', 'linkedin.com/pub/')
FORBIDDEN_SEQUENCES = ('--', '__', '-_', '_-')


class LinkedInInput(NamedTuple):
    username: str
    is_url: bool
    original_input: str
    is_valid: bool


def is_linkedin_url(value: Any) -> bool:
    """True if the input looks like a LinkedIn profile URL"""
    if not value or not isinstance(value, str):
        return False

    trimmed = value.strip().lower()
    return any(marker in trimmed for marker in URL_MARKERS)


def is_valid_linkedin_username(username: Any) -> bool:
    """
    Validate LinkedIn username format.

    Usernames are 3-100 characters of letters, digits, hyphens and
    underscores; they cannot start or end with a separator or contain two
    separators in a row.
    """
    if not username or not isinstance(username, str):
        return False

    trimmed = username.strip()
    return (
        3 <= len(trimmed) <= 100
        and USERNAME_PATTERN.match(trimmed) is not None
        and not any(seq in trimmed for seq in FORBIDDEN_SEQUENCES)
    )


def parse_linkedin_input(value: Any) -> LinkedInInput:
    """Extract the LinkedIn username from a URL or a plain username"""
    if not value or not isinstance(value, str):
        return LinkedInInput('', False, value if isinstance(value, str) else '', False)

    trimmed = value.strip()

    if not is_linkedin_url(trimmed):
        username = trimmed.strip('/')
        return LinkedInInput(username, False, trimmed, is_valid_linkedin_username(username))

    url = trimmed
    if not url.lower().startswith(('http://', 'https://')):
        url = 'https://' + url

    try:
        path = urlsplit(url).path
    except ValueError:
        return LinkedInInput('', True, trimmed, False)

    for pattern in PROFILE_PATH_PATTERNS:
        match = pattern.match(path)
        if match:
            username = unquote(match.group(1)).strip()
            return LinkedInInput(username, True, trimmed, is_valid_linkedin_username(username))

    return LinkedInInput('', True, trimmed, False)


def format_linkedin_url(username: Any) -> str:
    """Format a LinkedIn username into a full profile URL"""
    if not username or not isinstance(username, str):
        return ''

    trimmed = username.strip().strip('/')
    if not trimmed:
        return ''
    return f"https://www.linkedin.com/in/{trimmed}/"


def get_linkedin_display_info(value: Any) -> Dict[str, Any]:
    """User-friendly feedback for the LinkedIn input field"""
    parsed = parse_linkedin_input(value)

    if not parsed.is_valid:
        return {
            'display_text': value if isinstance(value, str) else '',
            'extracted_username': '',
            'was_url': parsed.is_url,
            'is_valid': False,
        }

    return {
        'display_text': f"Detected: {parsed.username}" if parsed.is_url else parsed.username,
        'extracted_username': parsed.username,
        'was_url': parsed.is_url,
        'is_valid': True,
    }
