"""
Lambda entry point tests - API Gateway proxy events.

Run with: pytest tests/test_lambda_handler.py
"""

import base64
import json

import pytest

from backend.src import lambda_handler
from backend.src.db.schema import TaskItem
from backend.src.services.tasks import TaskRequestHandler

from fakes import FakeTaskStore


class FakeContext:
    def __init__(self, remaining_ms: int = 30_000):
        self.remaining_ms = remaining_ms

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_ms


@pytest.fixture()
def lambda_store():
    store = FakeTaskStore()
    lambda_handler.set_request_handler(TaskRequestHandler(store))
    yield store
    lambda_handler.set_request_handler(None)


def test_post_event_creates_task(lambda_store):
    event = {"httpMethod": "POST", "body": json.dumps({"title": "From Lambda"})}

    result = lambda_handler.handler(event, FakeContext())

    assert result["statusCode"] == 201
    assert result["headers"] == {"Content-Type": "application/json"}
    body = json.loads(result["body"])
    assert body["title"] == "From Lambda"
    assert len(lambda_store.ops("put")) == 1


def test_get_event_with_path_parameters(lambda_store):
    lambda_store.tasks["123-456"] = TaskItem(task_id="123-456", title="Single Task")

    result = lambda_handler.handler(
        {"httpMethod": "GET", "pathParameters": {"id": "123-456"}, "body": None},
        FakeContext(),
    )

    assert result["statusCode"] == 200
    assert json.loads(result["body"])["taskId"] == "123-456"


def test_put_without_id_is_not_allowed(lambda_store):
    result = lambda_handler.handler({"httpMethod": "PUT", "pathParameters": None}, FakeContext())

    assert result == {"statusCode": 405, "headers": {}, "body": '{"message": "Method not allowed."}'}
    assert lambda_store.calls == []


def test_base64_body_is_decoded(lambda_store):
    encoded = base64.b64encode(json.dumps({"title": "Encoded"}).encode("utf-8")).decode("ascii")

    result = lambda_handler.handler(
        {"httpMethod": "POST", "body": encoded, "isBase64Encoded": True},
        FakeContext(),
    )

    assert result["statusCode"] == 201
    assert json.loads(result["body"])["title"] == "Encoded"


def test_undecodable_base64_body_is_rejected(lambda_store):
    result = lambda_handler.handler(
        {"httpMethod": "POST", "body": "***", "isBase64Encoded": True},
        FakeContext(),
    )

    assert result["statusCode"] == 400
    assert json.loads(result["body"]) == {"message": "Invalid request body."}
    assert lambda_store.calls == []


def test_remaining_time_bounds_the_store_call(lambda_store):
    lambda_store.delay = 0.5

    result = lambda_handler.handler({"httpMethod": "GET"}, FakeContext(remaining_ms=520))

    assert result["statusCode"] == 500
    assert json.loads(result["body"]) == {"message": "Internal server error."}


def test_handler_is_reused_across_invocations(lambda_store):
    first = lambda_handler.get_request_handler()
    lambda_handler.handler({"httpMethod": "GET"}, FakeContext())
    assert lambda_handler.get_request_handler() is first
