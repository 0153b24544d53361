"""
Web Configuration - Centralized settings management
"""
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from dotenv import load_dotenv

# Load backend/.env when present
_backend_env = Path(__file__).parent.parent.parent / ".env"
if _backend_env.exists():
    load_dotenv(_backend_env)

PROJECT_ROOT = Path(__file__).parent.parent.parent.parent


def _optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


class AppConfig(BaseModel):
    """Application configuration with environment variable support"""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Storage: "sqlite" or "dynamodb"
    store_backend: str = "sqlite"
    db_path: Path = PROJECT_ROOT / "data" / "tasks.db"
    table_name: str = "Tasks"
    aws_region: Optional[str] = None
    dynamodb_endpoint_url: Optional[str] = None

    # Per-request deadline in seconds (None = no deadline)
    request_timeout: Optional[float] = None

    # slowapi default limit for the HTTP gateway
    rate_limit: str = "60/minute"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables"""
        timeout = _optional("TASKS_REQUEST_TIMEOUT")
        return cls(
            host=os.getenv("TASKS_HOST", "127.0.0.1"),
            port=int(os.getenv("TASKS_PORT", "8000")),
            debug=os.getenv("TASKS_DEBUG", "0") == "1",
            log_level=os.getenv("TASKS_LOG_LEVEL", "INFO").upper(),
            store_backend=os.getenv("TASKS_STORE_BACKEND", "sqlite").strip().lower(),
            db_path=Path(os.getenv("TASKS_DB_PATH", str(PROJECT_ROOT / "data" / "tasks.db"))),
            table_name=os.getenv("TASKS_TABLE_NAME", "Tasks"),
            aws_region=_optional("AWS_REGION"),
            dynamodb_endpoint_url=_optional("TASKS_DYNAMODB_ENDPOINT_URL"),
            request_timeout=float(timeout) if timeout else None,
            rate_limit=os.getenv("TASKS_RATE_LIMIT", "60/minute"),
        )


# Global config instance
config = AppConfig.from_env()
