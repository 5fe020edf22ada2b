"""
Tests for LinkedIn URL / username parsing
"""

import pytest

from pacelane.onboarding.linkedin_parser import (
    LinkedInInput,
    format_linkedin_url,
    get_linkedin_display_info,
    is_linkedin_url,
    is_valid_linkedin_username,
    parse_linkedin_input,
)


class TestIsLinkedInUrl:

    @pytest.mark.parametrize('value', [
        'https://www.linkedin.com/in/jane-doe',
        'linkedin.com/in/jane-doe',
        '  HTTPS://LINKEDIN.COM/IN/Jane  ',
        'https://br.linkedin.com/pub/jane-doe/1/2/3',
    ])
    def test_profile_urls(self, value):
        assert is_linkedin_url(value)

    @pytest.mark.parametrize('value', ['jane-doe', 'https://linkedin.com/company/acme', '', None, 42])
    def test_not_profile_urls(self, value):
        assert not is_linkedin_url(value)


class TestUsernameValidation:

    @pytest.mark.parametrize('username', ['jane-doe', 'jane_doe', 'abc', 'JaneDoe123', 'a' * 100])
    def test_valid(self, username):
        assert is_valid_linkedin_username(username)

    @pytest.mark.parametrize('username', [
        'ab',             # too short
        'a' * 101,        # too long
        '-jane',          # leading separator
        'jane-',          # trailing separator
        'jane--doe',
        'jane__doe',
        'jane-_doe',
        'jane_-doe',
        'jane doe',
        'jane.doe',
        '',
        None,
    ])
    def test_invalid(self, username):
        assert not is_valid_linkedin_username(username)


class TestParseLinkedInInput:

    def test_full_url_with_query(self):
        """Query strings and trailing segments are ignored"""
        result = parse_linkedin_input('https://www.linkedin.com/in/jane-doe/?utm_source=share&utm_medium=member')
        assert result == LinkedInInput('jane-doe', True, 'https://www.linkedin.com/in/jane-doe/?utm_source=share&utm_medium=member', True)

    def test_url_without_scheme(self):
        result = parse_linkedin_input('linkedin.com/in/jane-doe')
        assert result.username == 'jane-doe'
        assert result.is_url
        assert result.is_valid

    def test_url_with_fragment(self):
        assert parse_linkedin_input('https://linkedin.com/in/jane-doe#about').username == 'jane-doe'

    def test_pub_url(self):
        result = parse_linkedin_input('https://www.linkedin.com/pub/jane-doe/12/345/678')
        assert result.username == 'jane-doe'
        assert result.is_valid

    def test_percent_encoded_username_is_decoded(self):
        result = parse_linkedin_input('https://www.linkedin.com/in/jos%C3%A9-silva')
        assert result.username == 'josé-silva'
        # Non-ASCII letters are not valid handles
        assert not result.is_valid

    def test_plain_username(self):
        result = parse_linkedin_input('  jane-doe/ ')
        assert result == LinkedInInput('jane-doe', False, 'jane-doe/', True)

    def test_invalid_plain_username(self):
        result = parse_linkedin_input('not a username')
        assert not result.is_url
        assert not result.is_valid

    def test_url_without_profile_segment(self):
        result = parse_linkedin_input('https://www.linkedin.com/in/')
        assert result.username == ''
        assert result.is_url
        assert not result.is_valid

    @pytest.mark.parametrize('value', ['', None])
    def test_empty_input(self, value):
        result = parse_linkedin_input(value)
        assert result.username == ''
        assert not result.is_url
        assert not result.is_valid
        assert result.original_input == ''


class TestFormatting:

    def test_format_linkedin_url(self):
        assert format_linkedin_url('jane-doe') == 'https://www.linkedin.com/in/jane-doe/'

    def test_format_strips_slashes(self):
        assert format_linkedin_url('/jane-doe/') == 'https://www.linkedin.com/in/jane-doe/'

    @pytest.mark.parametrize('value', ['', None, '   '])
    def test_format_empty(self, value):
        assert format_linkedin_url(value) == ''

    def test_display_info_for_url(self):
        info = get_linkedin_display_info('https://www.linkedin.com/in/jane-doe')
        assert info == {
            'display_text': 'Detected: jane-doe',
            'extracted_username': 'jane-doe',
            'was_url': True,
            'is_valid': True,
        }

    def test_display_info_for_username(self):
        info = get_linkedin_display_info('jane-doe')
        assert info['display_text'] == 'jane-doe'
        assert not info['was_url']

    def test_display_info_for_invalid_input(self):
        info = get_linkedin_display_info('x')
        assert info == {
            'display_text': 'x',
            'extracted_username': '',
            'was_url': False,
            'is_valid': False,
        }
