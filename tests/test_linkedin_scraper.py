"""
Tests for the Fresh API LinkedIn scraper
"""

import pytest
import requests

from pacelane.onboarding import linkedin_scraper
from pacelane.onboarding.linkedin_scraper import LinkedInScraper, scrape_error


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self.payload = payload
        self.text = text

    def json(self):
        if self.payload is None:
            raise ValueError('No JSON object could be decoded')
        return self.payload


FRESH_PAYLOAD = {
    'data': {
        'full_name': 'Jane Doe',
        'headline': 'CTO at Acme',
        'about': 'Building things',
        'location': 'Lisbon',
        'experiences': [
            {'company': 'Acme', 'title': 'CTO', 'start_date': '2020', 'end_date': None},
            {'company': {'name': 'Old Co'}, 'title': 'Engineer', 'start_date': '2015', 'end_date': '2020'},
        ],
        'education': [{'school': {'name': 'MIT'}, 'degree': 'BSc', 'field_of_study': 'CS'}],
        'skills': 'Python|Leadership| Strategy',
    }
}


@pytest.fixture
def captured(monkeypatch):
    calls = []

    def install(response=None, error=None):
        def fake_get(url, headers=None, params=None, timeout=None):
            calls.append({'url': url, 'headers': headers, 'params': params, 'timeout': timeout})
            if error:
                raise error
            return response

        monkeypatch.setattr(linkedin_scraper.requests, 'get', fake_get)
        return calls

    return install


class TestScrapeProfile:

    def test_invalid_input(self):
        result = LinkedInScraper('key').scrape_profile('no')
        assert result == {'error': 'Invalid LinkedIn URL - could not extract username'}

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv('FRESH_API_KEY', raising=False)
        result = LinkedInScraper().scrape_profile('jane-doe')
        assert result['error'] == 'Fresh API key not configured'

    def test_success(self, captured):
        calls = captured(FakeResponse(payload=FRESH_PAYLOAD))
        result = LinkedInScraper('key', timeout=5).scrape_profile('https://linkedin.com/in/jane-doe?x=1')

        assert calls[0]['url'].endswith('/get-linkedin-profile')
        assert calls[0]['params'] == {
            'linkedin_url': 'https://www.linkedin.com/in/jane-doe/',
            'include_skills': 'true',
        }
        assert calls[0]['headers']['x-rapidapi-key'] == 'key'
        assert calls[0]['timeout'] == 5

        assert result['full_name'] == 'Jane Doe'
        assert result['summary'] == 'Building things'
        assert result['current_position'] == 'CTO'
        assert result['current_company'] == 'Acme'
        assert result['work_history'][1]['company'] == 'Old Co'
        assert result['education'][0]['school'] == 'MIT'
        assert result['skills'] == ['Python', 'Leadership', 'Strategy']
        assert result['profile_url'] == 'https://www.linkedin.com/in/jane-doe/'
        assert scrape_error(result) is None

    def test_http_error(self, captured):
        captured(FakeResponse(status_code=429, text='Too many requests'))
        result = LinkedInScraper('key').scrape_profile('jane-doe')
        assert result == {'error': 'Fresh API error: 429', 'message': 'Too many requests'}

    def test_network_error(self, captured):
        captured(error=requests.ConnectionError('boom'))
        result = LinkedInScraper('key').scrape_profile('jane-doe')
        assert result['error'].startswith('Failed to scrape LinkedIn profile')

    def test_invalid_json(self, captured):
        captured(FakeResponse(payload=None))
        result = LinkedInScraper('key').scrape_profile('jane-doe')
        assert result == {'error': 'Fresh API returned an invalid response'}

    def test_unexpected_top_level_json(self, captured):
        captured(FakeResponse(payload=[]))
        result = LinkedInScraper('key').scrape_profile('jane-doe')
        assert result == {'error': 'Unexpected Fresh API response'}

    def test_unexpected_data_object(self, captured):
        captured(FakeResponse(payload={'data': 'Profile not found'}))
        result = LinkedInScraper('key').scrape_profile('jane-doe')
        assert result == {'error': 'Unexpected Fresh API response'}

    def test_skips_malformed_history_entries(self, captured):
        payload = {'data': {
            'full_name': 'Jane Doe',
            'education': ['MIT', {'school': 'IST', 'degree': 'MSc'}],
            'experiences': ['CTO at Acme', {'company': 'Acme', 'title': 'CTO'}],
        }}
        captured(FakeResponse(payload=payload))
        result = LinkedInScraper('key').scrape_profile('jane-doe')

        assert scrape_error(result) is None
        assert [edu['school'] for edu in result['education']] == ['IST']
        assert [exp['company'] for exp in result['work_history']] == ['Acme']
        assert result['current_position'] == 'CTO'


class TestSummarize:

    def test_summary_fields(self):
        scraped = {
            'full_name': 'Jane Doe',
            'headline': 'CTO',
            'current_company': 'Acme',
            'summary': 'Hi',
            'location': 'Lisbon',
            'skills': [str(i) for i in range(15)],
        }
        summary = LinkedInScraper('key').summarize(scraped)
        assert summary['name'] == 'Jane Doe'
        assert summary['company'] == 'Acme'
        assert summary['about'] == 'Hi'
        assert len(summary['skills']) == 10

    @pytest.mark.parametrize('scraped', [None, {'error': 'nope'}])
    def test_empty_summary(self, scraped):
        summary = LinkedInScraper('key').summarize(scraped)
        assert summary['name'] is None
        assert summary['skills'] == []

    def test_scrape_error(self):
        assert scrape_error(None) == 'No data returned'
        assert scrape_error({'error': 'x'}) == 'x'
