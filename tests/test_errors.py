import pytest

from moral_tales.errors import BackendError, QuotaExceededError, StoryError, is_quota_error


@pytest.mark.parametrize("message,expected", [
    ("Quota exceeded for quota metric 'generate_content_requests'", True),
    ("429 RESOURCE_EXHAUSTED. {'error': {'code': 429}}", True),
    ("you have used your daily quota", True),
    ("503 UNAVAILABLE. The model is overloaded.", False),
    ("400 INVALID_ARGUMENT", False),
    ("", False),
])
def test_is_quota_error(message, expected):
    assert is_quota_error(RuntimeError(message)) is expected


def test_quota_error_is_a_backend_error():
    assert issubclass(QuotaExceededError, BackendError)
    assert issubclass(BackendError, StoryError)
