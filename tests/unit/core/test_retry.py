from unittest.mock import AsyncMock, patch

import pytest

from bucket_counter.core.retry import retry_async


@pytest.mark.asyncio
async def test_returns_first_success():
    func = AsyncMock(return_value="ok")
    assert await retry_async(func) == "ok"
    func.assert_awaited_once()


@pytest.mark.asyncio
async def test_retries_then_succeeds():
    func = AsyncMock(side_effect=[OSError("down"), OSError("down"), True])
    attempts = []
    with patch("bucket_counter.core.retry.asyncio.sleep", new=AsyncMock()) as sleep:
        result = await retry_async(
            func,
            retries=3,
            base_delay=0.1,
            jitter=0,
            on_retry=lambda n, exc, delay: attempts.append((n, delay)),
        )
    assert result is True
    assert attempts == [(1, 0.1), (2, 0.2)]
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_reraises_after_last_attempt():
    func = AsyncMock(side_effect=OSError("down"))
    with patch("bucket_counter.core.retry.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(OSError):
            await retry_async(func, retries=2)
    assert func.await_count == 2


@pytest.mark.asyncio
async def test_does_not_retry_unlisted_errors():
    func = AsyncMock(side_effect=KeyError("x"))
    with pytest.raises(KeyError):
        await retry_async(func, retries=5, retry_on=(OSError,))
    func.assert_awaited_once()
