"""
Tests for the background suggestion task
"""

import pytest

from pacelane import tasks
from pacelane.celery_config import celery_app, make_celery
from pacelane.errors import ProfileNotFoundError, SuggestionGenerationError


class StubGenerator:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def generate(self, user_id):
        self.calls.append(user_id)
        if self.error:
            raise self.error
        return {'suggestions': [{'id': 1}, {'id': 2}, {'id': 3}], 'generated_at': '2025-05-01T12:00:00+00:00'}


@pytest.fixture
def use_generator(monkeypatch):
    def install(generator):
        monkeypatch.setattr(tasks, 'build_suggestion_generator', lambda: generator)
        return generator
    return install


class TestCeleryConfig:

    def test_json_only(self):
        app = make_celery('pacelane-test')
        assert app.conf.task_serializer == 'json'
        assert app.conf.accept_content == ['json']

    def test_suggestions_queue(self):
        routes = celery_app.conf.task_routes
        assert routes['pacelane.tasks.generate_content_suggestions_task'] == {'queue': 'suggestions'}

    def test_one_job_per_worker_slot(self):
        assert celery_app.conf.worker_prefetch_multiplier == 1
        assert celery_app.conf.task_acks_late is True

    def test_task_is_registered_under_its_routed_name(self):
        assert tasks.generate_content_suggestions_task.name == 'pacelane.tasks.generate_content_suggestions_task'


class TestGenerateTask:

    def test_success(self, use_generator):
        generator = use_generator(StubGenerator())
        result = tasks.generate_content_suggestions_task(5)

        assert generator.calls == [5]
        assert result == {
            'success': True,
            'user_id': 5,
            'count': 3,
            'generated_at': '2025-05-01T12:00:00+00:00',
        }

    def test_missing_profile_is_not_retried(self, use_generator):
        use_generator(StubGenerator(ProfileNotFoundError(5)))
        assert tasks.generate_content_suggestions_task(5) == {'success': False, 'error': 'Profile not found'}

    def test_generation_failure_is_retried(self, use_generator):
        # Called directly, retry() re-raises the original error
        use_generator(StubGenerator(SuggestionGenerationError('Failed to generate suggestions')))
        with pytest.raises(SuggestionGenerationError):
            tasks.generate_content_suggestions_task(5)

    def test_retry_policy(self):
        assert tasks.generate_content_suggestions_task.max_retries == 3
        assert tasks.generate_content_suggestions_task.default_retry_delay == 60
