import pytest
from flask import Request
from werkzeug.test import EnvironBuilder

from gateway import GatewayError

API_KEY = "test-update-key"


class FakeGateway:
    """Records every message handed to it instead of talking to FCM."""

    def __init__(self, message_id="msg-123", error=None):
        self.message_id = message_id
        self.error = error
        self.sent = []

    def send_to_topic(self, message):
        self.sent.append(message)
        if self.error:
            raise GatewayError(self.error)
        return self.message_id


def make_request(method="POST", json=None, headers=None, data=None):
    kwargs = {"method": method, "headers": headers or {}}
    if json is not None:
        kwargs["json"] = json
    if data is not None:
        kwargs["data"] = data
        kwargs["content_type"] = "application/json"
    builder = EnvironBuilder(**kwargs)
    try:
        return Request(builder.get_environ())
    finally:
        builder.close()


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def auth_headers():
    return {"x-api-key": API_KEY}
