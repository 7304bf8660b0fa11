import json
import os
import sys

import pytest
import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import Config, create_app  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Client Error", response=self)


class FakeSession:
    """Stands in for requests.Session; replies are queued per method."""

    def __init__(self):
        self.posts = []
        self.gets = []
        self.post_replies = []
        self.get_replies = []

    def _next(self, replies):
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        return self._next(self.post_replies)

    def get(self, url, **kwargs):
        self.gets.append((url, kwargs))
        return self._next(self.get_replies)


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


def token_reply(token="tok-1", expires_in=3600):
    return FakeResponse(200, {"access_token": token, "expires_in": expires_in, "token_type": "bearer"})


def streams_reply(*types):
    return FakeResponse(200, {"data": [{"user_name": "kasama", "type": t} for t in types]})


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return Config(client_id="cid", client_secret="secret", channel="kasama")


@pytest.fixture
def app(config, session):
    app = create_app(config, session=session)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
