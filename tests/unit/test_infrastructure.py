"""Unit tests for settings-driven plumbing: email, rate limiting, engine options."""

from types import SimpleNamespace

import pytest

from libs.common.config import Settings
from libs.common.emails import build_message, email_configured, send_email
from libs.common.rate_limit import client_ip
from libs.db.config import engine_options


def _request(headers=None, host="10.0.0.9"):
    # slowapi's get_remote_address only reads request.client.host
    return SimpleNamespace(headers=headers or {}, client=SimpleNamespace(host=host))


def test_client_ip_prefers_forwarded_for():
    request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
    assert client_ip(request) == "203.0.113.7"


def test_client_ip_falls_back_to_peer():
    assert client_ip(_request()) == "10.0.0.9"


@pytest.mark.asyncio
async def test_send_email_without_smtp_is_logged_only():
    assert email_configured() is False
    assert await send_email("parent@test.com", "Hello", "Body") is False


def test_build_message_headers():
    message = build_message("parent@test.com", "Session Update", "Moved", "<p>Moved</p>")

    assert message["To"] == "parent@test.com"
    assert message["Subject"] == "Session Update"
    assert "Grow Fitness" in message["From"]
    assert message.is_multipart()


def test_engine_options_skip_pool_for_sqlite():
    settings = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")
    assert "pool_size" not in engine_options(settings)


def test_engine_options_pool_for_postgres():
    settings = Settings(
        DATABASE_URL="postgresql://u:p@localhost/grow", DB_POOL_SIZE=5
    )
    options = engine_options(settings)

    assert settings.DATABASE_URL.startswith("postgresql+psycopg://")
    assert options["pool_size"] == 5
    assert options["pool_pre_ping"] is True
