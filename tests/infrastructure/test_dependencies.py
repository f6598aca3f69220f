"""Tests for the service container."""

import asyncio
import contextlib
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from claim_verifier.domain.models.source import Source, SourceVerificationStatus
from claim_verifier.infrastructure.dependencies import ServiceContainer


def _stale_source() -> Source:
    return Source(
        id="daily-planet",
        name="Daily Planet",
        url="https://dailyplanet.example",
        last_verified_at=datetime.now(timezone.utc) - timedelta(days=2),
        verification_status=SourceVerificationStatus.VERIFIED,
    )


def test_get_unknown_service():
    """Unknown service names raise KeyError."""
    with pytest.raises(KeyError):
        ServiceContainer().get("missing")


@pytest.mark.asyncio
async def test_reverify_sources_uses_checker():
    """Stale sources are checked and their new status reported."""
    checker = AsyncMock()
    checker.check.return_value = False
    container = ServiceContainer(source_checker=checker)
    source = container.get_source_registry().register_or_get(_stale_source())

    updated = await container.reverify_sources()

    assert updated == {"daily-planet": "unverified"}
    assert source.verification_status == SourceVerificationStatus.UNVERIFIED


@pytest.mark.asyncio
async def test_reverify_periodically_sweeps_until_cancelled():
    """The background sweep retries a failed source on its next pass."""
    checker = AsyncMock()
    checker.check.side_effect = [RuntimeError("boom"), True, True, True, True, True]
    container = ServiceContainer(source_checker=checker)
    source = container.get_source_registry().register_or_get(_stale_source())

    sweep = asyncio.create_task(container.reverify_periodically(interval=0.01))
    await asyncio.sleep(0.1)
    sweep.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep

    assert checker.check.await_count >= 2
    assert source.verification_status == SourceVerificationStatus.VERIFIED
    assert sweep.cancelled()
