import asyncio
import logging
import pytest

from parley.core.errors import SendError
from parley.core.helpers.spawn import TaskSpawner


@pytest.mark.ut
@pytest.mark.asyncio
async def test_tracks_tasks_until_done():
    spawner = TaskSpawner()
    release = asyncio.Event()

    async def work():
        await release.wait()

    task = spawner.spawn(work(), name="worker")
    assert task.get_name() == "worker"
    assert spawner.remaining_tasks == 1

    release.set()
    await task
    await asyncio.sleep(0)

    assert spawner.remaining_tasks == 0


@pytest.mark.ut
@pytest.mark.asyncio
async def test_cancelled_task_is_not_an_error(caplog):
    spawner = TaskSpawner(asyncio.get_running_loop())

    task = spawner.spawn(asyncio.sleep(10), name="sleeper")
    await asyncio.sleep(0)
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    await asyncio.sleep(0)

    assert spawner.remaining_tasks == 0
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.mark.ut
@pytest.mark.asyncio
async def test_unexpected_exception_is_logged(caplog):
    spawner = TaskSpawner()

    async def boom():
        raise ValueError("boom")

    task = spawner.spawn(boom(), name="boom")
    await asyncio.gather(task, return_exceptions=True)
    await asyncio.sleep(0)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "boom" in errors[0].getMessage()


@pytest.mark.ut
@pytest.mark.asyncio
async def test_domain_error_is_not_logged_as_error(caplog):
    caplog.set_level(logging.INFO, logger="core.helpers.spawn")
    spawner = TaskSpawner()

    async def fail():
        raise SendError("closed")

    task = spawner.spawn(fail(), name="sender")
    await asyncio.gather(task, return_exceptions=True)
    await asyncio.sleep(0)

    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert any("sender failed" in r.getMessage() for r in caplog.records)
