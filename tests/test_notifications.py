"""Tests for test pushes and the notification center."""

import asyncio
import json
import logging

import httpx

from evoshape.adapters.onesignal_client import HttpxOneSignalClient
from evoshape.domain.errors import PushProviderError
from evoshape.services.notifications import (
    PUSH_ENV_MISSING_ERROR,
    NotificationService,
)
from tests.conftest import (
    FIXED_NOW,
    FakePushClient,
    InMemoryNotificationRepository,
    fixed_clock,
)


def _service(  # type: ignore[no-untyped-def]
    repository: InMemoryNotificationRepository, push_client=None
) -> NotificationService:
    return NotificationService(
        repository=repository, push_client=push_client, clock=fixed_clock
    )


def test_send_uses_defaults_and_records_notification() -> None:
    repository = InMemoryNotificationRepository()
    push_client = FakePushClient()

    result = asyncio.run(
        _service(repository, push_client).send_test_notification("user-1", {})
    )

    assert result.ok is True
    assert result.status == 200
    assert push_client.sent == [
        {
            "external_user_id": "user-1",
            "title": "EvoShape",
            "body": "Notification de test",
            "url": "/app/notifications",
        }
    ]
    assert len(repository.rows) == 1
    assert repository.rows[0].user_id == "user-1"
    assert repository.rows[0].source == "onesignal"


def test_send_uses_given_fields() -> None:
    repository = InMemoryNotificationRepository()
    push_client = FakePushClient()

    asyncio.run(
        _service(repository, push_client).send_test_notification(
            "user-1", {"title": " Hello ", "body": "World", "url": "/app"}
        )
    )

    assert push_client.sent[0]["title"] == "Hello"
    assert repository.rows[0].body == "World"
    assert repository.rows[0].url == "/app"


def test_send_without_client_reports_missing_env() -> None:
    repository = InMemoryNotificationRepository()

    result = asyncio.run(_service(repository).send_test_notification("user-1", {}))

    assert result.ok is False
    assert result.status == 500
    assert result.error == PUSH_ENV_MISSING_ERROR
    assert repository.rows == []


def test_send_provider_error_skips_insert() -> None:
    repository = InMemoryNotificationRepository()
    push_client = FakePushClient(error=PushProviderError("fail", status_code=400))

    result = asyncio.run(
        _service(repository, push_client).send_test_notification("user-1", {})
    )

    assert result.ok is False
    assert result.error == "fail"
    assert repository.rows == []


def test_send_with_failing_provider_response_skips_insert() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "fail"})

    push_client = HttpxOneSignalClient(
        app_id="app-id",
        api_key="api-key",
        api_url="https://onesignal.com/api/v1/notifications",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    repository = InMemoryNotificationRepository()

    result = asyncio.run(
        _service(repository, push_client).send_test_notification("user-abc", {})
    )

    assert result.ok is False
    assert result.error == "fail"
    assert repository.rows == []


def test_send_succeeds_through_http_client() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content.decode()))
        return httpx.Response(200, json={"id": "n-1"})

    push_client = HttpxOneSignalClient(
        app_id="app-id",
        api_key="api-key",
        api_url="https://onesignal.com/api/v1/notifications",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    repository = InMemoryNotificationRepository()

    result = asyncio.run(
        _service(repository, push_client).send_test_notification(
            "user-abc", {"title": "Hello", "body": "World"}
        )
    )

    assert result.ok is True
    assert seen[0]["include_external_user_ids"] == ["user-abc"]
    assert repository.rows[0].user_id == "user-abc"


def test_send_log_failure_is_not_reported(caplog, monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setattr(logging.getLogger("evoshape"), "propagate", True)
    repository = InMemoryNotificationRepository(insert_error="insert failed")
    push_client = FakePushClient()

    with caplog.at_level(logging.WARNING, logger="evoshape"):
        result = asyncio.run(
            _service(repository, push_client).send_test_notification("user-1", {})
        )

    assert result.ok is True
    assert len(push_client.sent) == 1
    assert "insert failed" in caplog.text


def _seeded(count: int) -> InMemoryNotificationRepository:
    repository = InMemoryNotificationRepository()
    push_client = FakePushClient()
    service = _service(repository, push_client)
    for index in range(count):
        asyncio.run(
            service.send_test_notification("user-1", {"title": f"Title {index}"})
        )
    return repository


def test_list_page_is_newest_first_with_unread_count() -> None:
    repository = _seeded(3)
    service = _service(repository)

    page = service.list_page("user-1", limit=2)

    assert [item.title for item in page.items] == ["Title 2", "Title 1"]
    assert page.unread_count == 3
    assert page.has_more is True
    assert service.list_page("user-1", limit=2, offset=2).has_more is False


def test_mark_read_and_mark_all_read() -> None:
    repository = _seeded(3)
    service = _service(repository)

    service.mark_read("user-1", "1")
    assert service.list_page("user-1").unread_count == 2

    service.mark_all_read("user-1")
    page = service.list_page("user-1")
    assert page.unread_count == 0
    assert all(item.read_at == FIXED_NOW for item in page.items)


def test_delete_is_soft() -> None:
    repository = _seeded(2)
    service = _service(repository)

    service.delete("user-1", "2")

    assert [item.id for item in service.list_page("user-1").items] == ["1"]
    assert len(repository.rows) == 2
    assert repository.rows[1].deleted_at == FIXED_NOW

    service.delete_all("user-1")
    page = service.list_page("user-1")
    assert page.items == []
    assert page.unread_count == 0


def test_other_users_rows_are_invisible() -> None:
    repository = _seeded(1)
    service = _service(repository)

    assert service.list_page("user-2").items == []
    service.delete_all("user-2")
    assert service.list_page("user-1").unread_count == 1
