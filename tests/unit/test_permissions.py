"""Unit tests for scenedoc.permissions.manager: the query-then-request
permission protocol and its boolean and three-valued results.
"""
from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from scenedoc.fs.base import PermissionMode, PermissionState
from scenedoc.permissions.manager import (
    FileHandlePermissionManager,
    PermissionOutcome,
    PermissionStatus,
)

pytestmark = pytest.mark.anyio


def _handle(
    query: PermissionState | Exception = PermissionState.PROMPT,
    request: PermissionState | Exception = PermissionState.DENIED,
) -> MagicMock:
    """Return a mock file handle with scripted permission answers."""
    handle = MagicMock(name="handle")
    handle.query_permission = AsyncMock(
        side_effect=query if isinstance(query, Exception) else None,
        return_value=query,
    )
    handle.request_permission = AsyncMock(
        side_effect=request if isinstance(request, Exception) else None,
        return_value=request,
    )
    return handle


class TestVerifyPermission:
    async def test_already_granted_skips_request(self) -> None:
        handle = _handle(query=PermissionState.GRANTED)
        assert await FileHandlePermissionManager().verify_permission(handle) is True
        handle.query_permission.assert_awaited_once_with(PermissionMode.READWRITE)
        handle.request_permission.assert_not_awaited()

    async def test_request_granted(self) -> None:
        handle = _handle(request=PermissionState.GRANTED)
        assert await FileHandlePermissionManager().verify_permission(handle) is True
        handle.request_permission.assert_awaited_once_with(PermissionMode.READWRITE)

    async def test_request_denied(self) -> None:
        handle = _handle(request=PermissionState.DENIED)
        assert await FileHandlePermissionManager().verify_permission(handle) is False

    async def test_request_left_at_prompt_is_refusal(self) -> None:
        handle = _handle(request=PermissionState.PROMPT)
        assert await FileHandlePermissionManager().verify_permission(handle) is False

    async def test_previously_denied_still_requests(self) -> None:
        handle = _handle(query=PermissionState.DENIED, request=PermissionState.GRANTED)
        assert await FileHandlePermissionManager().verify_permission(handle) is True

    async def test_query_error_is_false(self, caplog: pytest.LogCaptureFixture) -> None:
        handle = _handle(query=RuntimeError("handle revoked"))
        with caplog.at_level(logging.ERROR, logger="scenedoc.permissions.manager"):
            assert await FileHandlePermissionManager().verify_permission(handle) is False
        handle.request_permission.assert_not_awaited()
        assert "Permission check failed" in caplog.text

    async def test_request_error_is_false(self) -> None:
        handle = _handle(request=OSError("platform error"))
        assert await FileHandlePermissionManager().verify_permission(handle) is False

    async def test_not_cached_between_calls(self) -> None:
        handle = _handle(query=PermissionState.GRANTED)
        manager = FileHandlePermissionManager()
        await manager.verify_permission(handle)
        handle.query_permission.return_value = PermissionState.PROMPT
        assert await manager.verify_permission(handle) is False
        assert handle.query_permission.await_count == 2

    async def test_custom_mode(self) -> None:
        handle = _handle(query=PermissionState.GRANTED)
        await FileHandlePermissionManager(PermissionMode.READ).verify_permission(handle)
        handle.query_permission.assert_awaited_once_with(PermissionMode.READ)


class TestCheckPermission:
    async def test_granted_without_prompt(self) -> None:
        outcome = await FileHandlePermissionManager().check_permission(
            _handle(query=PermissionState.GRANTED)
        )
        assert outcome == PermissionOutcome(PermissionStatus.GRANTED, prompted=False)
        assert outcome.granted is True

    async def test_granted_after_prompt(self) -> None:
        outcome = await FileHandlePermissionManager().check_permission(
            _handle(request=PermissionState.GRANTED)
        )
        assert outcome.status == PermissionStatus.GRANTED
        assert outcome.prompted is True

    async def test_denied(self) -> None:
        outcome = await FileHandlePermissionManager().check_permission(_handle())
        assert outcome.status == PermissionStatus.DENIED
        assert outcome.error is None

    async def test_error_distinguished_from_denial(self) -> None:
        error = RuntimeError("boom")
        outcome = await FileHandlePermissionManager().check_permission(_handle(query=error))
        assert outcome.status == PermissionStatus.ERROR
        assert outcome.error is error
        assert outcome.prompted is False
        assert outcome.granted is False

    async def test_error_during_request_marks_prompted(self) -> None:
        outcome = await FileHandlePermissionManager().check_permission(
            _handle(request=RuntimeError("dismissed"))
        )
        assert outcome.status == PermissionStatus.ERROR
        assert outcome.prompted is True
