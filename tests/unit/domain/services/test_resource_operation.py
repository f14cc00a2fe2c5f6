"""Unit tests for the retry-wrapped resource operation runner."""

from unittest.mock import AsyncMock

import pytest

from anacan.core.config import Settings
from anacan.domain.entities.provisioning import FailureReason, OutcomeStatus
from anacan.domain.services.resource_operation import ResourceOperationRunner, RetryPolicy
from anacan.infrastructure.appwrite.errors import AppwriteError, AppwriteNetworkError


@pytest.fixture
def runner(recording_sleep):
    return ResourceOperationRunner(RetryPolicy(), sleep=recording_sleep)


def network_error():
    return AppwriteNetworkError("Connection reset by peer")


class TestRetryPolicy:
    def test_delay_grows_linearly_up_to_cap(self):
        policy = RetryPolicy(base_delay=1.5, max_delay=3.0)

        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [1.5, 3.0, 3.0, 3.0]

    def test_jitter_is_bounded(self):
        policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter=0.5)

        for _ in range(20):
            assert 1.0 <= policy.delay_for(1) <= 1.5

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)
        with pytest.raises(ValueError):
            RetryPolicy(base_delay=-1)

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            retry_max_attempts=5,
            retry_base_delay=0.5,
            retry_max_delay=2.0,
            retry_jitter=0.1,
        )

        assert RetryPolicy.from_settings(settings) == RetryPolicy(5, 0.5, 2.0, 0.1)


class TestResourceOperationRunner:
    @pytest.mark.asyncio
    async def test_created_on_first_attempt(self, runner, recording_sleep):
        create = AsyncMock()

        outcome = await runner.run("collection", "posts", create)

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.attempts == 1
        create.assert_awaited_once()
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failures", [1, 2])
    async def test_transient_failures_below_limit_succeed(self, runner, recording_sleep, failures):
        create = AsyncMock(side_effect=[network_error() for _ in range(failures)] + [None])

        outcome = await runner.run("attribute", "posts.slug", create)

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.attempts == failures + 1
        assert create.await_count == failures + 1
        assert recording_sleep.delays == [1.5, 3.0][:failures]

    @pytest.mark.asyncio
    async def test_transient_failures_exhaust_retries(self, runner, recording_sleep):
        create = AsyncMock(side_effect=[network_error() for _ in range(3)])

        outcome = await runner.run("attribute", "posts.slug", create)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.reason == FailureReason.NETWORK
        assert outcome.attempts == 3
        assert outcome.error == "Connection reset by peer"
        assert create.await_count == 3
        assert recording_sleep.delays == [1.5, 3.0]

    @pytest.mark.asyncio
    async def test_conflict_is_success_without_retry(self, runner, recording_sleep):
        create = AsyncMock(side_effect=AppwriteError("Attribute already exists", code=409))

        outcome = await runner.run("attribute", "posts.slug", create)

        assert outcome.status == OutcomeStatus.ALREADY_EXISTS
        assert outcome.succeeded is True
        create.assert_awaited_once()
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, runner, recording_sleep):
        create = AsyncMock(side_effect=AppwriteError("Invalid default value", code=400))

        outcome = await runner.run("attribute", "posts.status", create)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.reason == FailureReason.OTHER
        assert outcome.error == "Invalid default value"
        create.assert_awaited_once()
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_existing_resource_is_not_created(self, runner):
        create = AsyncMock()
        exists = AsyncMock(return_value=True)

        outcome = await runner.run("collection", "posts", create, exists)

        assert outcome.status == OutcomeStatus.ALREADY_EXISTS
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existence_probe_is_retried_on_network_error(self, runner, recording_sleep):
        create = AsyncMock()
        exists = AsyncMock(side_effect=[network_error(), False])

        outcome = await runner.run("collection", "posts", create, exists)

        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.attempts == 2
        assert exists.await_count == 2
        create.assert_awaited_once()
        assert recording_sleep.delays == [1.5]

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self, recording_sleep):
        runner = ResourceOperationRunner(RetryPolicy(max_attempts=1), sleep=recording_sleep)
        create = AsyncMock(side_effect=network_error())

        outcome = await runner.run("database", "anacan", create)

        assert outcome.reason == FailureReason.NETWORK
        assert outcome.attempts == 1
        assert recording_sleep.delays == []
