"""Tests for rallyhub/api_logging.py — decorators and file logging."""

from __future__ import annotations

import logging

import pytest

from rallyhub.api_logging import log_api_call, log_service_call


class _FakeRepo:
    """Minimal class to test logging decorators."""

    @log_api_call
    def get_items(self, season: int) -> list[dict]:
        return [{"name": "item1"}, {"name": "item2"}]

    @log_api_call
    def get_failing(self, key: int) -> list[dict]:
        raise ValueError("test error")

    @log_api_call
    async def fetch_rally(self, rally_id: str) -> dict:
        return {"id": rally_id}

    @log_api_call
    async def fetch_failing(self, rally_id: str) -> dict:
        raise LookupError(rally_id)

    @log_service_call
    def compute_stuff(self, data: list) -> dict:
        return {"result": len(data)}

    @log_service_call
    def compute_failing(self) -> None:
        raise RuntimeError("service error")

    @log_service_call
    async def refresh(self, *, force: bool = False) -> bool:
        return force


@pytest.fixture
def fake_repo():
    return _FakeRepo()


def _log_text(log_dir) -> str:
    return (log_dir / "api_calls.log").read_text(encoding="utf-8")


class TestLogApiCall:
    def test_returns_result(self, fake_repo):
        assert fake_repo.get_items(2025) == [{"name": "item1"}, {"name": "item2"}]

    def test_logs_call_and_ok(self, fake_repo, _api_log_to_tmp):
        fake_repo.get_items(2025)
        content = _log_text(_api_log_to_tmp)
        assert "CALL: _FakeRepo.get_items(2025)" in content
        assert "OK: _FakeRepo.get_items(2025) -> 2 items" in content

    def test_logs_failure(self, fake_repo, _api_log_to_tmp):
        with pytest.raises(ValueError, match="test error"):
            fake_repo.get_failing(123)
        content = _log_text(_api_log_to_tmp)
        assert "FAIL: _FakeRepo.get_failing(123)" in content
        assert "ValueError" in content

    def test_preserves_function_name(self, fake_repo):
        assert fake_repo.get_items.__name__ == "get_items"
        assert fake_repo.fetch_rally.__name__ == "fetch_rally"

    @pytest.mark.asyncio
    async def test_async_call_logged_after_await(self, fake_repo, _api_log_to_tmp):
        assert await fake_repo.fetch_rally("r-1") == {"id": "r-1"}
        content = _log_text(_api_log_to_tmp)
        assert "CALL: _FakeRepo.fetch_rally('r-1')" in content
        assert "OK: _FakeRepo.fetch_rally('r-1') -> 1 items" in content

    @pytest.mark.asyncio
    async def test_async_failure(self, fake_repo, _api_log_to_tmp):
        with pytest.raises(LookupError):
            await fake_repo.fetch_failing("r-404")
        assert "FAIL: _FakeRepo.fetch_failing('r-404') -> LookupError" in _log_text(_api_log_to_tmp)


class TestLogServiceCall:
    def test_returns_result(self, fake_repo):
        assert fake_repo.compute_stuff([1, 2, 3]) == {"result": 3}

    def test_logs_service_call(self, fake_repo, _api_log_to_tmp):
        fake_repo.compute_stuff([1, 2])
        content = _log_text(_api_log_to_tmp)
        assert "SERVICE CALL: _FakeRepo.compute_stuff" in content
        assert "SERVICE OK: _FakeRepo.compute_stuff" in content

    def test_logs_service_failure(self, fake_repo, _api_log_to_tmp):
        with pytest.raises(RuntimeError, match="service error"):
            fake_repo.compute_failing()
        content = _log_text(_api_log_to_tmp)
        assert "SERVICE FAIL: _FakeRepo.compute_failing" in content
        assert "RuntimeError" in content

    @pytest.mark.asyncio
    async def test_async_keyword_arguments(self, fake_repo, _api_log_to_tmp):
        assert await fake_repo.refresh(force=True) is True
        assert "SERVICE CALL: _FakeRepo.refresh(force=True)" in _log_text(_api_log_to_tmp)

    def test_creates_log_directory(self, tmp_path):
        """Log directory is created on first use."""
        import rallyhub.api_logging as mod

        new_dir = tmp_path / "nested" / "logs"
        mod._LOG_DIR = str(new_dir)
        mod._LOG_FILE = str(new_dir / "api_calls.log")
        mod._logger = None
        logging.getLogger("rallyhub.api").handlers.clear()

        _FakeRepo().compute_stuff([])

        assert (new_dir / "api_calls.log").exists()
