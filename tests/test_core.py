"""
Tests for logging and personal data encryption
"""

import logging

import psycopg2
import pytest
from cryptography.fernet import Fernet

from pacelane.core.data_safety import DataEncryption
from pacelane.core.logging_config import SensitiveDataFilter, get_logger
from pacelane.db import SCHEMA_STATEMENTS, get_db_connection, init_database


def make_record(msg, **extra):
    record = logging.LogRecord('pacelane.test', logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSensitiveDataFilter:

    def test_redacts_key_value_pairs(self):
        record = make_record('api_key=sk-123456')
        SensitiveDataFilter().filter(record)
        assert record.msg == 'api_key=***REDACTED***'

    def test_redacts_phone_numbers(self):
        record = make_record('Sending summary to +55 11 98765-4321 now')
        SensitiveDataFilter().filter(record)
        assert '98765' not in record.msg
        assert record.msg.startswith('Sending summary to ***REDACTED***')

    def test_redacts_bare_digit_runs(self):
        record = make_record('Callback requested by 5511987654321')
        SensitiveDataFilter().filter(record)
        assert record.msg == 'Callback requested by ***REDACTED***'

    def test_keeps_dates_and_ids(self):
        message = 'Suggestions for 2025-10-16 stored under 550e8400-e29b-41d4'
        record = make_record(message)
        SensitiveDataFilter().filter(record)
        assert record.msg == message

    def test_redacts_extra_fields(self):
        record = make_record('Saved number', whatsapp_number='+5511987654321')
        assert SensitiveDataFilter().filter(record) is True
        assert record.whatsapp_number == '***REDACTED***'

    def test_leaves_ordinary_messages(self):
        record = make_record('Saved pacing preferences for user 12')
        SensitiveDataFilter().filter(record)
        assert record.msg == 'Saved pacing preferences for user 12'

    def test_get_logger(self):
        assert get_logger('pacelane.profiles').name == 'pacelane.profiles'


class TestDataEncryption:

    @pytest.fixture(scope='class')
    def encryption(self):
        return DataEncryption()

    def test_round_trip(self, encryption):
        token = encryption.encrypt_sensitive_data('+5511987654321')
        assert token != '+5511987654321'
        assert encryption.decrypt_sensitive_data(token) == '+5511987654321'

    def test_empty_values_pass_through(self, encryption):
        assert encryption.encrypt_sensitive_data(None) is None
        assert encryption.decrypt_sensitive_data('') == ''

    def test_unreadable_token(self, encryption):
        assert encryption.decrypt_sensitive_data('not-a-fernet-token') is None

    def test_lookup_hash_is_stable(self, encryption):
        first = encryption.hash_for_lookup('jane@example.com')
        assert first == encryption.hash_for_lookup('jane@example.com')
        assert first != encryption.hash_for_lookup('john@example.com')
        assert len(first) == 64

    def test_master_key_from_environment(self, monkeypatch):
        key = Fernet.generate_key()
        monkeypatch.setenv('ENCRYPTION_MASTER_KEY', key.decode())
        token = Fernet(key).encrypt(b'hello').decode()
        assert DataEncryption().decrypt_sensitive_data(token) == 'hello'


class TestInitDatabase:

    def test_creates_every_table(self, fake_db):
        init_database(fake_db.connect)

        statements = fake_db.statements()
        assert len(statements) == len(SCHEMA_STATEMENTS)
        for table in ('users', 'profiles', 'inspirations', 'knowledge_files', 'content_suggestions'):
            assert any(sql.startswith(f'CREATE TABLE IF NOT EXISTS {table} ') for sql in statements)
        assert fake_db.commits == 1
        assert fake_db.closed == 1

    def test_failure_rolls_back(self, fake_db):
        fake_db.fail_on = 'CREATE TABLE IF NOT EXISTS profiles'
        fake_db.error = psycopg2.ProgrammingError('permission denied')

        with pytest.raises(psycopg2.ProgrammingError):
            init_database(fake_db.connect)
        assert fake_db.rollbacks == 1
        assert fake_db.commits == 0

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.delenv('DATABASE_URL', raising=False)
        with pytest.raises(RuntimeError, match='DATABASE_URL'):
            get_db_connection()
