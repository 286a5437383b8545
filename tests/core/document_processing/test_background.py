"""
Tests for the background task runner.

System role: Verification of fire-and-forget scheduling
"""

import asyncio
import logging

import pytest

from knowledge_base.core.document_processing import BackgroundTaskRunner
from knowledge_base.core.exceptions import ProcessingFailedError


class TestBackgroundTaskRunner:
    """Test suite for BackgroundTaskRunner."""

    @pytest.mark.asyncio
    async def test_schedule_does_not_wait(self) -> None:
        # Arrange
        runner = BackgroundTaskRunner()
        release = asyncio.Event()
        done: list[str] = []

        async def work() -> None:
            await release.wait()
            done.append("ran")

        # Act
        runner.schedule(work, name="blocked")

        # Assert
        assert runner.pending == 1
        assert done == []
        release.set()
        await runner.drain()
        assert done == ["ran"]
        assert runner.pending == 0

    @pytest.mark.asyncio
    async def test_failures_are_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        runner = BackgroundTaskRunner()

        async def boom(value: int) -> None:
            raise RuntimeError(f"boom {value}")

        with caplog.at_level(logging.ERROR):
            runner.schedule(boom, 7, name="exploding")
            await runner.drain()

        assert "boom 7" in caplog.text
        assert "exploding" in caplog.text

    @pytest.mark.asyncio
    async def test_domain_failures_are_not_logged_again(self, caplog: pytest.LogCaptureFixture) -> None:
        runner = BackgroundTaskRunner()

        async def fail() -> None:
            raise ProcessingFailedError("Processing failed", document_id="doc-1")

        with caplog.at_level(logging.DEBUG):
            runner.schedule(fail, name="chunking")
            await runner.drain()

        records = [r for r in caplog.records if r.name == "knowledge_base.core.document_processing.background"]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        assert records[0].exc_info is None

    @pytest.mark.asyncio
    async def test_drain_waits_for_tasks_scheduled_during_drain(self) -> None:
        runner = BackgroundTaskRunner()
        order: list[str] = []

        async def child() -> None:
            order.append("child")

        async def parent() -> None:
            order.append("parent")
            runner.schedule(child)

        runner.schedule(parent)
        await runner.drain()

        assert order == ["parent", "child"]
