"""
Configuration tests - environment parsing.

Run with: pytest tests/test_config.py
"""

from pathlib import Path

from backend.src.web.config import AppConfig


def test_defaults(monkeypatch):
    for name in (
        "TASKS_STORE_BACKEND",
        "TASKS_TABLE_NAME",
        "TASKS_REQUEST_TIMEOUT",
        "TASKS_DYNAMODB_ENDPOINT_URL",
        "TASKS_RATE_LIMIT",
        "TASKS_LOG_LEVEL",
        "TASKS_DB_PATH",
    ):
        monkeypatch.delenv(name, raising=False)

    cfg = AppConfig.from_env()

    assert cfg.store_backend == "sqlite"
    assert cfg.table_name == "Tasks"
    assert cfg.request_timeout is None
    assert cfg.dynamodb_endpoint_url is None
    assert cfg.rate_limit == "60/minute"
    assert cfg.log_level == "INFO"
    assert cfg.db_path.name == "tasks.db"


def test_from_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TASKS_STORE_BACKEND", " DynamoDB ")
    monkeypatch.setenv("TASKS_TABLE_NAME", "TasksTest")
    monkeypatch.setenv("TASKS_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("TASKS_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("TASKS_DYNAMODB_ENDPOINT_URL", "http://localhost:8001")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("TASKS_PORT", "9000")
    monkeypatch.setenv("TASKS_DEBUG", "1")
    monkeypatch.setenv("TASKS_LOG_LEVEL", "debug")

    cfg = AppConfig.from_env()

    assert cfg.store_backend == "dynamodb"
    assert cfg.table_name == "TasksTest"
    assert cfg.db_path == Path(tmp_path / "x.db")
    assert cfg.request_timeout == 2.5
    assert cfg.dynamodb_endpoint_url == "http://localhost:8001"
    assert cfg.aws_region == "eu-west-1"
    assert cfg.port == 9000
    assert cfg.debug is True
    assert cfg.log_level == "DEBUG"
