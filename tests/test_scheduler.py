"""
Tests for the commission refresh job.
"""

import logging
from contextlib import asynccontextmanager

import pytest

from src.config import settings
from src.scheduler import jobs


class TestSetupScheduler:
    def test_disabled_when_interval_zero(self, monkeypatch):
        monkeypatch.setattr(settings, "commission_refresh_minutes", 0)
        assert jobs.setup_scheduler() is False

    def test_registers_job(self, monkeypatch):
        monkeypatch.setattr(settings, "commission_refresh_minutes", 5)
        try:
            assert jobs.setup_scheduler() is True
            assert jobs.scheduler.get_job("commission_refresh") is not None
        finally:
            jobs.scheduler.remove_all_jobs()


class TestCommissionRefreshJob:
    @pytest.mark.asyncio
    async def test_refreshes_today(self, monkeypatch, db_session):
        calls = []

        @asynccontextmanager
        async def fake_db_context():
            yield db_session

        async def fake_refresh(db, day):
            calls.append(day)
            return []

        monkeypatch.setattr(jobs, "get_db_context", fake_db_context)
        monkeypatch.setattr(jobs, "refresh_commission", fake_refresh)

        await jobs.commission_refresh_job()

        assert calls == [jobs.business_today()]

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, monkeypatch, db_session, caplog):
        @asynccontextmanager
        async def fake_db_context():
            yield db_session

        async def failing_refresh(db, day):
            raise RuntimeError("database went away")

        monkeypatch.setattr(jobs, "get_db_context", fake_db_context)
        monkeypatch.setattr(jobs, "refresh_commission", failing_refresh)

        with caplog.at_level(logging.ERROR, logger="src.scheduler.jobs"):
            await jobs.commission_refresh_job()

        assert "Commission refresh job failed" in caplog.text
