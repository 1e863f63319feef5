" generic fixtures "
import json
import logging

import pytest

from randwall.httpclient import HttpResponse


def pytest_configure():
    "Runs once before all"
    from randwall.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


class FakeHttpClient:
    """Scripted HTTP client: answers GETs in order and records requested URLs.

    Answers can be a dict/list (served as JSON), a str (served as is),
    an HttpResponse, or an exception to raise.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.requested = []

    async def get(self, url):
        self.requested.append(url)
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        if isinstance(answer, HttpResponse):
            return answer
        body = answer if isinstance(answer, str) else json.dumps(answer)
        return HttpResponse(status=200, url=url, body=body)


@pytest.fixture
def fake_client():
    "Factory for scripted HTTP clients"
    return FakeHttpClient


@pytest.fixture
def test_logger():
    """Provide a silent logger for tests."""
    logger = logging.getLogger("test_randwall")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger
