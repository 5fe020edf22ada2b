"""
Tests for profile preference storage
"""

import pytest

from pacelane.core.data_safety import DataEncryption
from pacelane.errors import ProfileNotFoundError, ValidationError
from pacelane.profiles import ProfileStore, clean_whatsapp_number, mask_whatsapp_number


@pytest.fixture(scope='module')
def encryption():
    return DataEncryption()


@pytest.fixture
def store(fake_db, encryption):
    # Every successful UPDATE ... RETURNING * hands back this row
    fake_db.fetchone_results = [{'user_id': 1, 'content_guides': None}]
    return ProfileStore(fake_db.connect, encryption)


def last_update(fake_db):
    sql, params = fake_db.executed[-1]
    assert sql.startswith('UPDATE profiles SET')
    return sql, params


class TestWhatsAppHelpers:

    def test_clean_with_dial_code(self):
        assert clean_whatsapp_number('+55', '(11) 98765-4321') == '+5511987654321'

    def test_own_country_code_wins(self):
        assert clean_whatsapp_number('+55', '+1 415-555-0100') == '+14155550100'

    def test_clean_empty(self):
        assert clean_whatsapp_number('+55', '   ') == ''

    def test_mask(self):
        assert mask_whatsapp_number('+5511987654321') == '+55*********21'

    def test_mask_short_or_empty(self):
        assert mask_whatsapp_number('+1234') == '+1234'
        assert mask_whatsapp_number(None) == ''


class TestReading:

    def test_missing_profile(self, fake_db, encryption):
        store = ProfileStore(fake_db.connect, encryption)
        with pytest.raises(ProfileNotFoundError):
            store.get_profile(42)
        assert fake_db.closed == 1

    def test_whatsapp_number_is_decrypted(self, fake_db, encryption):
        fake_db.fetchone_results = [{
            'user_id': 1,
            'whatsapp_number_encrypted': encryption.encrypt_sensitive_data('+5511987654321'),
            'content_guides': None,
        }]
        profile = ProfileStore(fake_db.connect, encryption).get_profile(1)

        assert profile['whatsapp_number'] == '+5511987654321'
        assert 'whatsapp_number_encrypted' not in profile
        assert profile['content_guides'] == {}

    def test_ensure_profile_is_idempotent_insert(self, fake_db, encryption):
        ProfileStore(fake_db.connect, encryption).ensure_profile(7)
        sql, params = fake_db.executed[0]
        assert 'ON CONFLICT (user_id) DO NOTHING' in sql
        assert params == (7,)
        assert fake_db.commits == 1


class TestUpdate:

    def test_missing_profile_rolls_back(self, fake_db, encryption):
        store = ProfileStore(fake_db.connect, encryption)
        with pytest.raises(ProfileNotFoundError):
            store.complete_onboarding(1)
        assert fake_db.rollbacks == 1
        assert fake_db.commits == 0

    def test_unknown_column(self, store, fake_db):
        with pytest.raises(ValueError):
            store._update(1, {'password_hash': 'x'})
        assert fake_db.executed == []

    def test_complete_onboarding(self, store, fake_db):
        store.complete_onboarding(1)
        sql, params = last_update(fake_db)
        assert 'onboarding_completed = %s' in sql
        assert params == (True, 1)


class TestLinkedIn:

    def test_required(self, store):
        with pytest.raises(ValidationError, match='LinkedIn profile URL is required'):
            store.save_linkedin_profile(1, '  ')

    def test_invalid(self, store):
        with pytest.raises(ValidationError, match='valid LinkedIn profile URL or username'):
            store.save_linkedin_profile(1, 'https://www.linkedin.com/in/-bad')

    def test_saves_canonical_url_and_username(self, store, fake_db):
        store.save_linkedin_profile(1, 'https://www.linkedin.com/in/jane-doe?trk=share')
        sql, params = last_update(fake_db)
        assert sql == (
            'UPDATE profiles SET linkedin_profile = %s, linkedin_username = %s, '
            'updated_at = CURRENT_TIMESTAMP WHERE user_id = %s RETURNING *'
        )
        assert params == ('https://www.linkedin.com/in/jane-doe/', 'jane-doe', 1)
        assert fake_db.commits == 1

    def test_save_scraped_data(self, store, fake_db):
        scraped = {'full_name': 'Jane Doe', 'headline': 'CTO', 'current_company': 'Acme', 'summary': 'Hi'}
        store.save_linkedin_data(1, scraped)
        _, params = last_update(fake_db)
        assert params[0].adapted == scraped
        assert params[1:5] == ('Jane Doe', 'CTO', 'Acme', 'Hi')
        assert params[5] is not None

    def test_review_requires_name(self, store):
        with pytest.raises(ValidationError, match='Please enter your name'):
            store.update_linkedin_summary(1, ' ', 'CTO', 'Acme', '')

    def test_review_blank_fields_become_null(self, store, fake_db):
        store.update_linkedin_summary(1, ' Jane ', '', 'Acme', '  ')
        _, params = last_update(fake_db)
        assert params == ('Jane', None, 'Acme', None, 1)


class TestWhatsApp:

    @pytest.mark.parametrize('number', ['', '1234', '+1234567890123456'])
    def test_invalid_numbers(self, store, number):
        with pytest.raises(ValidationError, match='Please enter a valid WhatsApp number'):
            store.save_whatsapp_number(1, '+55', number)

    def test_number_is_stored_encrypted(self, store, fake_db, encryption):
        store.save_whatsapp_number(1, '+55', '11 98765-4321')
        sql, params = last_update(fake_db)
        assert 'whatsapp_number_encrypted = %s' in sql
        assert params[0] != '+5511987654321'
        assert encryption.decrypt_sensitive_data(params[0]) == '+5511987654321'


class TestPacing:

    def valid(self, **overrides):
        data = {
            'intensity': '2-3 pieces of content per week',
            'frequency': ['fri', 'mon'],
            'daily_summary_time': '10:00 AM',
            'followups_frequency': 'Weekly',
            'recommendations_time': '3:00 PM',
            'context_sessions_time': '8:00 PM',
        }
        data.update(overrides)
        return data

    def test_saves_days_in_week_order(self, store, fake_db):
        store.save_pacing_preferences(1, self.valid())
        _, params = last_update(fake_db)
        assert params[0].adapted == {
            'intensity': '2-3 pieces of content per week',
            'frequency': ['mon', 'fri'],
            'daily_summary_time': '10:00 AM',
            'followups_frequency': 'Weekly',
            'recommendations_time': '3:00 PM',
            'context_sessions_time': '8:00 PM',
        }

    def test_missing_times_use_defaults(self, store, fake_db):
        store.save_pacing_preferences(1, {'intensity': 'Daily content', 'frequency': ['sun']})
        pacing = last_update(fake_db)[1][0].adapted
        assert pacing['daily_summary_time'] == '9:00 AM'
        assert pacing['followups_frequency'] == 'Daily'
        assert pacing['recommendations_time'] == '2:00 PM'
        assert pacing['context_sessions_time'] == '5:00 PM'

    @pytest.mark.parametrize('overrides, message', [
        ({'intensity': None}, 'Please select an intensity level'),
        ({'intensity': 'Hourly'}, 'Please select a valid intensity level'),
        ({'frequency': []}, 'Please select at least one day'),
        ({'frequency': ['mon', 'funday']}, 'Please select valid days of the week'),
        ({'daily_summary_time': '3:00 AM'}, 'Please select a valid option for daily summary time'),
    ])
    def test_invalid(self, store, fake_db, overrides, message):
        with pytest.raises(ValidationError, match=message):
            store.save_pacing_preferences(1, self.valid(**overrides))
        assert fake_db.executed == []


class TestGoalsGuidesPillarsFormat:

    def test_goals_required(self, store):
        with pytest.raises(ValidationError, match='Please select at least one goal'):
            store.save_goals(1, ['  '])

    def test_goals_from_list(self, store):
        with pytest.raises(ValidationError, match='Please select goals from the list'):
            store.save_goals(1, ['Build Authority', 'Get Rich'])

    def test_goals_and_audiences(self, store, fake_db):
        store.save_goals(1, ['Build Authority', 'Build Authority', 'Share Ideas'], ['Founders', '', 'Founders', 'CTOs'])
        _, params = last_update(fake_db)
        assert params[0].adapted == ['Build Authority', 'Share Ideas']
        assert params[1].adapted == ['Founders', 'CTOs']

    def test_guides_required(self, store):
        with pytest.raises(ValidationError, match='Please add at least one guide'):
            store.save_content_guides(1, ['', '   '])

    def test_guides_merge_into_content_guides(self, store, fake_db):
        store.save_content_guides(1, ['Be authentic', ' Avoid hype '])
        sql, params = last_update(fake_db)
        assert "content_guides = COALESCE(content_guides, '{}'::jsonb) || %s::jsonb" in sql
        assert params[0].adapted == {'guides': ['Be authentic', 'Avoid hype']}
        assert params[1] == 1

    def test_pillars_themes_first(self, store, fake_db):
        store.save_content_pillars(1, ['AI in healthcare', 'How-To'], ['How-To', 'Case Studies'])
        _, params = last_update(fake_db)
        assert params[0].adapted == ['AI in healthcare', 'How-To', 'Case Studies']

    def test_pillars_unknown_content_type(self, store):
        with pytest.raises(ValidationError, match='Please select content types from the list'):
            store.save_content_pillars(1, [], ['Gossip'])

    def test_pillars_required(self, store):
        with pytest.raises(ValidationError, match='Please select at least one content pillar'):
            store.save_content_pillars(1, [' '], [])

    def test_writing_format_defaults_to_standard(self, store, fake_db):
        store.save_writing_format(1, None)
        _, params = last_update(fake_db)
        assert params[0].adapted == {'writing_format': 'standard'}

    def test_writing_format_invalid(self, store):
        with pytest.raises(ValidationError, match='Please select a writing format'):
            store.save_writing_format(1, 'haiku')
