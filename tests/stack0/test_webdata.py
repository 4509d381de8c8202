"""Tests for batch job and schedule operations shared by screenshots and extraction."""

from datetime import datetime

import pytest

from core.errors import OperationTimeout
from stack0.resources import Extraction, Screenshots


@pytest.fixture
def screenshots(transport):
    return Screenshots(transport=transport)


@pytest.fixture
def extraction(transport):
    return Extraction(transport=transport)


class TestBatch:
    @pytest.mark.asyncio
    async def test_batch_uses_type_specific_path(self, screenshots, extraction, transport):
        transport.post.return_value = {"id": "batch_1", "status": "pending", "totalUrls": 2}
        request = {"urls": ["https://a.test", "https://b.test"], "config": {"format": "png"}}

        await screenshots.batch(request)
        await extraction.batch(request)

        paths = [call[0][0] for call in transport.post.await_args_list]
        assert paths == ["/webdata/batch/screenshots", "/webdata/batch/extractions"]
        assert transport.post.await_args[0][1] == {
            "urls": ["https://a.test", "https://b.test"],
            "config": {"format": "png"},
        }

    @pytest.mark.asyncio
    async def test_get_batch_job(self, screenshots, transport):
        transport.get.return_value = {"id": "batch_1", "startedAt": "2024-01-15T10:30:00Z"}

        job = await screenshots.get_batch_job("batch_1", environment="sandbox")

        assert isinstance(job["startedAt"], datetime)
        transport.get.assert_awaited_once_with(
            "/webdata/batch/batch_1", params={"environment": "sandbox", "projectId": None}
        )

    @pytest.mark.asyncio
    async def test_list_batch_jobs_filters_by_type(self, extraction, transport):
        transport.get.return_value = {"items": [], "nextCursor": None}

        await extraction.list_batch_jobs(status="completed")

        params = transport.get.await_args[1]["params"]
        assert params["type"] == "extraction"
        assert params["status"] == "completed"

    @pytest.mark.asyncio
    async def test_cancel_batch_job(self, screenshots, transport):
        transport.post.return_value = {"success": True}

        await screenshots.cancel_batch_job("batch_1", project_id="proj_1")

        transport.post.assert_awaited_once_with(
            "/webdata/batch/batch_1/cancel", {}, params={"environment": None, "projectId": "proj_1"}
        )


class TestBatchAndWait:
    @pytest.mark.asyncio
    async def test_returns_failed_job(self, screenshots, transport):
        transport.post.return_value = {"id": "batch_1", "status": "pending"}
        transport.get.side_effect = [
            {"id": "batch_1", "status": "processing", "processedUrls": 1},
            {"id": "batch_1", "status": "failed", "successfulUrls": 1, "failedUrls": 1},
        ]

        job = await screenshots.batch_and_wait({"urls": ["https://a.test", "https://b.test"]}, poll_interval=0)

        assert job["status"] == "failed"
        assert job["failedUrls"] == 1

    @pytest.mark.asyncio
    async def test_returns_cancelled_job(self, extraction, transport):
        transport.post.return_value = {"id": "batch_1"}
        transport.get.return_value = {"id": "batch_1", "status": "cancelled"}

        job = await extraction.batch_and_wait({"urls": ["https://a.test"]}, poll_interval=0)

        assert job["status"] == "cancelled"

    @pytest.mark.asyncio
    async def test_scope_passed_to_status_fetch(self, screenshots, transport):
        transport.post.return_value = {"id": "batch_1"}
        transport.get.return_value = {"id": "batch_1", "status": "completed"}

        await screenshots.batch_and_wait(
            {"urls": ["https://a.test"], "environment": "production", "project_id": "proj_1"}
        )

        assert transport.get.await_args[1]["params"] == {"environment": "production", "projectId": "proj_1"}

    @pytest.mark.asyncio
    async def test_timeout(self, screenshots, transport):
        transport.post.return_value = {"id": "batch_1"}
        transport.get.return_value = {"id": "batch_1", "status": "processing"}

        with pytest.raises(OperationTimeout) as exc_info:
            await screenshots.batch_and_wait({"urls": ["https://a.test"]}, poll_interval=0.01, timeout=0.05)

        assert exc_info.value.snapshot["status"] == "processing"


class TestSchedules:
    @pytest.mark.asyncio
    async def test_create_schedule_adds_type(self, extraction, transport):
        transport.post.return_value = {"id": "sch_1"}

        await extraction.create_schedule(
            {"name": "Daily news", "url": "https://news.test", "frequency": "daily", "detect_changes": True}
        )

        transport.post.assert_awaited_once_with(
            "/webdata/schedules",
            {
                "name": "Daily news",
                "url": "https://news.test",
                "frequency": "daily",
                "config": {},
                "detectChanges": True,
                "type": "extraction",
            },
        )

    @pytest.mark.asyncio
    async def test_update_schedule(self, screenshots, transport):
        transport.post.return_value = {"success": True}

        await screenshots.update_schedule(
            {"id": "sch_1", "environment": "sandbox", "frequency": "weekly", "webhook_url": None}
        )

        transport.post.assert_awaited_once_with(
            "/webdata/schedules/sch_1",
            {"frequency": "weekly", "webhookUrl": None},
            params={"environment": "sandbox", "projectId": None},
        )

    @pytest.mark.asyncio
    async def test_get_schedule(self, screenshots, transport):
        transport.get.return_value = {
            "id": "sch_1",
            "nextRunAt": "2024-01-16T00:00:00Z",
            "lastRunAt": None,
        }

        schedule = await screenshots.get_schedule("sch_1")

        assert isinstance(schedule["nextRunAt"], datetime)
        assert schedule["lastRunAt"] is None

    @pytest.mark.asyncio
    async def test_list_schedules(self, screenshots, transport):
        transport.get.return_value = {"items": [{"id": "sch_1", "updatedAt": "2024-01-15T10:30:00Z"}]}

        page = await screenshots.list_schedules(is_active=False, limit=5)

        assert isinstance(page["items"][0]["updatedAt"], datetime)
        params = transport.get.await_args[1]["params"]
        assert params["type"] == "screenshot"
        assert params["isActive"] is False
        assert params["limit"] == 5

    @pytest.mark.asyncio
    async def test_delete_schedule(self, screenshots, transport):
        await screenshots.delete_schedule("sch_1", project_id="proj_1")

        transport.delete_with_body.assert_awaited_once_with(
            "/webdata/schedules/sch_1",
            {"id": "sch_1", "projectId": "proj_1"},
            params={"environment": None, "projectId": "proj_1"},
        )

    @pytest.mark.asyncio
    async def test_toggle_schedule(self, screenshots, transport):
        transport.post.return_value = {"isActive": False}

        result = await screenshots.toggle_schedule("sch_1")

        assert result == {"isActive": False}
        assert transport.post.await_args[0][:2] == ("/webdata/schedules/sch_1/toggle", {})
