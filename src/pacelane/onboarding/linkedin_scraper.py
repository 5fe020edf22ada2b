"""
LinkedIn Profile Scraper using Fresh API
Scrapes public LinkedIn profile data for the profile review and inspirations steps
"""

import os
from typing import Any, Dict, List, Optional

import requests

from ..core.logging_config import get_logger
from .linkedin_parser import format_linkedin_url, parse_linkedin_input

logger = get_logger(__name__)


class LinkedInScraper:
    """Scraper for public LinkedIn profile data using Fresh API"""

    def __init__(self, fresh_api_key: str = None, timeout: int = 30):
        """
        Initialize the LinkedIn scraper

        Args:
            fresh_api_key: API key for Fresh API (RapidAPI)
            timeout: Request timeout in seconds
        """
        self.fresh_api_key = fresh_api_key or os.environ.get('FRESH_API_KEY')
        self.timeout = timeout

        # Fresh API is accessed through RapidAPI
        self.base_url = "https://fresh-linkedin-profile-data.p.rapidapi.com"
        self.headers = {
            "x-rapidapi-key": self.fresh_api_key,
            "x-rapidapi-host": "fresh-linkedin-profile-data.p.rapidapi.com"
        }

    def scrape_profile(self, linkedin_url: str) -> Dict[str, Any]:
        """
        Scrape a LinkedIn profile using Fresh API

        Args:
            linkedin_url: The LinkedIn profile URL or username

        Returns:
            Dictionary containing scraped profile data, or {"error": ...}
        """
        parsed = parse_linkedin_input(linkedin_url)
        if not parsed.is_valid:
            return {"error": "Invalid LinkedIn URL - could not extract username"}

        if not self.fresh_api_key:
            logger.warning("FRESH_API_KEY not configured, skipping LinkedIn scrape")
            return {
                "error": "Fresh API key not configured",
                "note": "Set FRESH_API_KEY environment variable"
            }

        profile_url = format_linkedin_url(parsed.username)

        try:
            response = requests.get(
                f"{self.base_url}/get-linkedin-profile",
                headers=self.headers,
                params={
                    "linkedin_url": profile_url,
                    "include_skills": "true"
                },
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"LinkedIn scrape request failed for {parsed.username}: {e}")
            return {"error": f"Failed to scrape LinkedIn profile: {str(e)}"}

        if response.status_code != 200:
            logger.warning(f"Fresh API returned {response.status_code} for {parsed.username}")
            return {
                "error": f"Fresh API error: {response.status_code}",
                "message": response.text
            }

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Fresh API returned invalid JSON for {parsed.username}")
            return {"error": "Fresh API returned an invalid response"}

        try:
            result = self._parse_fresh_api_response(data)
        except (AttributeError, TypeError, ValueError):
            logger.error(f"Unexpected Fresh API response shape for {parsed.username}", exc_info=True)
            return {"error": "Unexpected Fresh API response"}
        if not result.get('profile_url'):
            result['profile_url'] = profile_url

        logger.info(f"Scraped LinkedIn profile for {parsed.username}")
        return result

    def _parse_fresh_api_response(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Parse Fresh API response into our format"""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        profile_data = (data.get('data') or {}) if 'data' in data else data
        if not isinstance(profile_data, dict):
            raise ValueError(f"Expected profile data object, got {type(profile_data).__name__}")

        education = []
        edu_list = profile_data.get('education', [])
        if isinstance(edu_list, list):
            for edu in edu_list:
                if not isinstance(edu, dict):
                    continue
                school = edu.get('school')
                education.append({
                    'school': school.get('name') if isinstance(school, dict) else school,
                    'degree': edu.get('degree'),
                    'field': edu.get('field_of_study'),
                    'start': edu.get('start_date'),
                    'end': edu.get('end_date')
                })

        work_history = []
        exp_list = profile_data.get('experiences', []) or profile_data.get('experience', [])
        if isinstance(exp_list, list):
            for exp in exp_list:
                if not isinstance(exp, dict):
                    continue
                company = exp.get('company')
                work_history.append({
                    'company': company.get('name') if isinstance(company, dict) else company,
                    'title': exp.get('title'),
                    'description': exp.get('description'),
                    'start': exp.get('start_date'),
                    'end': exp.get('end_date'),
                    'location': exp.get('location')
                })

        # Current position is the first entry without an end date
        current_position = None
        current_company = profile_data.get('company')
        for exp in work_history:
            if not exp.get('end'):
                current_position = exp.get('title')
                current_company = current_company or exp.get('company')
                break

        skills = []
        skills_data = profile_data.get('skills', [])
        if isinstance(skills_data, list):
            for skill in skills_data:
                if isinstance(skill, dict):
                    skills.append(skill.get('name', ''))
                else:
                    skills.append(str(skill))
        elif isinstance(skills_data, str):
            skills = [s.strip() for s in skills_data.split('|')]

        location = profile_data.get('location')
        if isinstance(location, dict):
            location = location.get('name')

        return {
            "full_name": profile_data.get('full_name') or profile_data.get('name'),
            "headline": profile_data.get('headline') or profile_data.get('tagline'),
            "summary": profile_data.get('summary') or profile_data.get('about'),
            "location": location,
            "current_position": current_position,
            "current_company": current_company,
            "education": education,
            "work_history": work_history,
            "skills": [s for s in skills if s],
            "profile_url": profile_data.get('linkedin_url'),
        }

    def summarize(self, scraped_data: Dict[str, Any], max_skills: int = 10) -> Dict[str, Any]:
        """
        Reduce scraped data to the fields shown on the profile review page

        Args:
            scraped_data: Dictionary returned by scrape_profile
            max_skills: How many skills to keep

        Returns:
            Dict with name, headline, company, about, location and skills
        """
        if not scraped_data or scraped_data.get('error'):
            return {
                'name': None,
                'headline': None,
                'company': None,
                'about': None,
                'location': None,
                'skills': [],
            }

        skills: List[str] = scraped_data.get('skills') or []
        return {
            'name': scraped_data.get('full_name'),
            'headline': scraped_data.get('headline'),
            'company': scraped_data.get('current_company'),
            'about': scraped_data.get('summary'),
            'location': scraped_data.get('location'),
            'skills': skills[:max_skills],
        }


def scrape_error(scraped_data: Optional[Dict[str, Any]]) -> Optional[str]:
    """The error message of a failed scrape, or None on success"""
    if not scraped_data:
        return "No data returned"
    return scraped_data.get('error')
