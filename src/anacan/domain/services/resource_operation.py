"""Retry-wrapped execution of idempotent remote operations.

Every remote mutation made by the provisioner and the seed loader goes
through :class:`ResourceOperationRunner`. An attempt either creates the
resource, finds it already present, or fails. Transient network failures
are retried under a :class:`RetryPolicy`; "already exists" ends the
operation immediately and counts as success.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from anacan.core.logging import get_logger
from anacan.domain.entities.provisioning import FailureReason, ProvisioningOutcome
from anacan.infrastructure.appwrite.errors import AppwriteError, AppwriteNetworkError

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry policy for transient network failures.

    The delay before retry ``n`` (1-based) is ``min(base_delay * n, max_delay)``
    plus a random jitter in ``[0, jitter]``.

    Attributes:
        max_attempts: Total number of attempts, including the first.
        base_delay: Delay in seconds before the first retry.
        max_delay: Upper bound of the increasing delay.
        jitter: Maximum random seconds added to each delay.
    """

    max_attempts: int = 3
    base_delay: float = 1.5
    max_delay: float = 3.0
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0 or self.jitter < 0:
            raise ValueError("Retry delays must not be negative")

    @classmethod
    def from_settings(cls, settings: Any) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after failed attempt number ``attempt``."""
        delay = min(self.base_delay * attempt, self.max_delay)
        if self.jitter:
            delay += random.uniform(0, self.jitter)
        return delay


class ResourceOperationRunner:
    """Runs create-if-absent operations with outcome classification."""

    def __init__(self, policy: RetryPolicy | None = None, sleep: Sleep = asyncio.sleep) -> None:
        """Initialize the runner.

        Args:
            policy: Retry policy; defaults to three attempts.
            sleep: Awaitable sleep function, injectable for tests.
        """
        self.policy = policy or RetryPolicy()
        self.sleep = sleep

    async def run(
        self,
        resource_type: str,
        resource_id: str,
        create: Callable[[], Awaitable[Any]],
        exists: Callable[[], Awaitable[bool]] | None = None,
    ) -> ProvisioningOutcome:
        """Create a resource unless it already exists.

        Args:
            resource_type: Kind of resource, used for reporting.
            resource_id: Identity of the resource, used for reporting.
            create: Performs the remote creation.
            exists: Optional existence probe run before each creation attempt.

        Returns:
            ProvisioningOutcome: Created, AlreadyExists or Failed.
        """
        log = logger.bind(resource_type=resource_type, resource_id=resource_id)
        attempt = 0

        while True:
            attempt += 1
            try:
                if exists is not None and await exists():
                    log.info("Resource already exists", status="already_exists", attempt=attempt)
                    return ProvisioningOutcome.already_exists(resource_type, resource_id, attempt)

                await create()
                log.info("Resource created", status="created", attempt=attempt)
                return ProvisioningOutcome.created(resource_type, resource_id, attempt)

            except AppwriteNetworkError as e:
                if attempt >= self.policy.max_attempts:
                    log.error(
                        "Network error, giving up",
                        status="failed",
                        reason=FailureReason.NETWORK.value,
                        attempt=attempt,
                        error=e.message,
                    )
                    return ProvisioningOutcome.failed(
                        resource_type, resource_id, FailureReason.NETWORK, e.message, attempt
                    )

                delay = self.policy.delay_for(attempt)
                log.warning(
                    "Network error, retrying",
                    attempt=attempt,
                    attempts_left=self.policy.max_attempts - attempt,
                    delay=delay,
                    error=e.message,
                )
                await self.sleep(delay)

            except AppwriteError as e:
                if e.is_conflict:
                    log.info("Resource already exists", status="already_exists", attempt=attempt)
                    return ProvisioningOutcome.already_exists(resource_type, resource_id, attempt)

                log.error(
                    "Resource operation failed",
                    status="failed",
                    reason=FailureReason.OTHER.value,
                    attempt=attempt,
                    code=e.code,
                    error=e.message,
                )
                return ProvisioningOutcome.failed(
                    resource_type, resource_id, FailureReason.OTHER, e.message, attempt
                )
