import pytest

from kafka_topics.core.config import get_settings


class FakeAdminClient:
    """Stands in for KafkaAdminClient; the instance doubles as its factory."""

    def __init__(self, topics=None, error=None, connect_error=None):
        self.topics = list(topics or [])
        self.error = error
        self.connect_error = connect_error
        self.config = None
        self.calls = []
        self.closed = False

    def __call__(self, **config):
        self.config = config
        if self.connect_error is not None:
            raise self.connect_error
        return self

    def list_topics(self):
        self.calls.append(("list_topics",))
        if self.error is not None:
            raise self.error
        return list(self.topics)

    def create_topics(self, new_topics):
        self.calls.append(("create_topics", new_topics))
        if self.error is not None:
            raise self.error

    def delete_topics(self, topics):
        self.calls.append(("delete_topics", topics))
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


@pytest.fixture
def fake_admin():
    return FakeAdminClient(topics=["a", "b"])


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ("KAFKA_TOPICS_CLIENT_ID", "KAFKA_TOPICS_LOG_LEVEL", "KAFKA_TOPICS_ADMIN_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
