"""Schema provisioner.

Brings the remote database into conformance with a set of declared
SchemaDefinitions. Collections, attributes and indexes are created one at a
time, in declared order, with settle delays between dependent mutations
because the remote service is eventually consistent.
"""

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Any, Iterable

from anacan.core.logging import get_logger
from anacan.domain.entities.provisioning import (
    FailureReason,
    OutcomeStatus,
    ProvisioningOutcome,
    ProvisioningReport,
)
from anacan.domain.entities.schema import SchemaDefinition
from anacan.domain.services.resource_operation import ResourceOperationRunner, Sleep
from anacan.infrastructure.appwrite.client import AppwriteClient
from anacan.infrastructure.appwrite.errors import AppwriteError

logger = get_logger(__name__)


class ProvisioningAbortedError(Exception):
    """Raised when a failure prevents the run from continuing."""

    def __init__(self, message: str, outcome: ProvisioningOutcome, report: ProvisioningReport) -> None:
        self.message = message
        self.outcome = outcome
        self.report = report
        super().__init__(message)


@dataclass(frozen=True)
class SettlePolicy:
    """Pauses that let the remote service catch up after a mutation.

    The values are empirical defaults, not guarantees.

    Attributes:
        collection_delay: Pause after creating a collection.
        attribute_delay: Pause after creating each attribute.
        index_barrier_delay: Pause before the first index of a collection.
        index_delay: Pause after creating each index.
        poll_attributes: Poll attribute status instead of the barrier delay.
        poll_timeout: Maximum seconds to poll for attribute availability.
        poll_interval: First polling interval, doubled up to 8 seconds.
    """

    collection_delay: float = 2.0
    attribute_delay: float = 1.5
    index_barrier_delay: float = 2.0
    index_delay: float = 1.5
    poll_attributes: bool = False
    poll_timeout: float = 30.0
    poll_interval: float = 0.5

    MAX_POLL_INTERVAL = 8.0

    @classmethod
    def from_settings(cls, settings: Any) -> "SettlePolicy":
        return cls(
            collection_delay=settings.collection_settle_delay,
            attribute_delay=settings.attribute_settle_delay,
            index_barrier_delay=settings.index_barrier_delay,
            index_delay=settings.index_settle_delay,
            poll_attributes=settings.poll_attribute_status,
            poll_timeout=settings.attribute_poll_timeout,
        )


class SchemaProvisioner:
    """Creates databases, collections, attributes and indexes if absent."""

    def __init__(
        self,
        client: AppwriteClient,
        database_id: str,
        runner: ResourceOperationRunner | None = None,
        settle: SettlePolicy | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the provisioner.

        Args:
            client: Remote service client authenticated with an admin key.
            database_id: Database holding the collections.
            runner: Retry-wrapped operation runner.
            settle: Settle delays between dependent mutations.
            sleep: Awaitable sleep function, injectable for tests.
        """
        self.client = client
        self.database_id = database_id
        self.runner = runner or ResourceOperationRunner(sleep=sleep)
        self.settle = settle or SettlePolicy()
        self.sleep = sleep

    async def provision(self, definitions: Iterable[SchemaDefinition]) -> ProvisioningReport:
        """Provision the database and every definition in declared order.

        Returns:
            ProvisioningReport: Outcome of every resource.

        Raises:
            ProvisioningAbortedError: If the database or a collection cannot
                be created for a reason other than a network failure.
        """
        report = ProvisioningReport()

        outcome = report.add(await self.ensure_database())
        if not outcome.succeeded:
            raise ProvisioningAbortedError(
                f"Failed to create database '{self.database_id}': {outcome.error}",
                outcome,
                report,
            )

        for definition in definitions:
            await self.provision_collection(definition, report)

        logger.info(
            "Provisioning finished",
            created=report.created,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    async def ensure_database(self) -> ProvisioningOutcome:
        """Create the containing database if it does not exist."""
        return await self.runner.run(
            "database",
            self.database_id,
            create=partial(self.client.create_database, self.database_id, self.database_id),
            exists=partial(self.client.database_exists, self.database_id),
        )

    async def provision_collection(
        self, definition: SchemaDefinition, report: ProvisioningReport | None = None
    ) -> ProvisioningReport:
        """Reconcile one collection with its definition.

        An existing collection is not skipped: missing attributes and indexes
        are still added to it.
        """
        report = report if report is not None else ProvisioningReport()
        collection_id = definition.collection_id
        logger.info("Provisioning collection", collection_id=collection_id)

        outcome = report.add(
            await self.runner.run(
                "collection",
                collection_id,
                create=partial(
                    self.client.create_collection,
                    self.database_id,
                    collection_id,
                    definition.display_name,
                    definition.permission_strings,
                ),
                exists=partial(self.client.collection_exists, self.database_id, collection_id),
            )
        )

        if outcome.status == OutcomeStatus.FAILED:
            if outcome.reason == FailureReason.OTHER:
                raise ProvisioningAbortedError(
                    f"Failed to create collection '{collection_id}': {outcome.error}",
                    outcome,
                    report,
                )
            logger.error(
                "Skipping attributes and indexes of unavailable collection",
                collection_id=collection_id,
            )
            return report

        if outcome.status == OutcomeStatus.CREATED:
            await self.sleep(self.settle.collection_delay)

        available: set[str] = set()
        created: list[str] = []
        for attr in definition.attributes:
            outcome = report.add(
                await self.runner.run(
                    "attribute",
                    f"{collection_id}.{attr.key}",
                    create=partial(self.client.create_attribute, self.database_id, collection_id, attr),
                )
            )
            if outcome.succeeded:
                available.add(attr.key)
            if outcome.status == OutcomeStatus.CREATED:
                created.append(attr.key)
                await self.sleep(self.settle.attribute_delay)

        if definition.indexes:
            if self.settle.poll_attributes:
                # Existing attributes may still be building after an interrupted run
                indexed = {key for index in definition.indexes for key in index.attribute_keys}
                keys = [a.key for a in definition.attributes if a.key in indexed & available]
                if keys:
                    available -= await self.wait_for_attributes(collection_id, keys)
            elif created:
                await self.sleep(self.settle.index_barrier_delay)

        for index in definition.indexes:
            resource_id = f"{collection_id}.{index.key}"
            missing = [key for key in index.attribute_keys if key not in available]
            if missing:
                error = f"Referenced attributes unavailable: {', '.join(missing)}"
                logger.error(
                    "Skipping index",
                    resource_type="index",
                    resource_id=resource_id,
                    error=error,
                )
                report.add(
                    ProvisioningOutcome.failed("index", resource_id, FailureReason.OTHER, error, 0)
                )
                continue

            outcome = report.add(
                await self.runner.run(
                    "index",
                    resource_id,
                    create=partial(self.client.create_index, self.database_id, collection_id, index),
                )
            )
            if outcome.status == OutcomeStatus.CREATED:
                await self.sleep(self.settle.index_delay)

        return report

    async def wait_for_attributes(self, collection_id: str, keys: list[str]) -> set[str]:
        """Poll until the given attributes report status ``available``.

        Returns:
            Keys that did not become available: failed, or still pending at the timeout.
        """
        pending = set(keys)
        failed: set[str] = set()
        waited = 0.0
        interval = self.settle.poll_interval

        while pending:
            for key in sorted(pending):
                try:
                    attribute = await self.client.get_attribute(self.database_id, collection_id, key)
                except AppwriteError as e:
                    logger.warning(
                        "Attribute status check failed",
                        collection_id=collection_id,
                        key=key,
                        error=e.message,
                    )
                    continue
                status = attribute.get("status")
                if status == "available":
                    pending.discard(key)
                elif status == "failed":
                    logger.error(
                        "Attribute failed to build",
                        collection_id=collection_id,
                        key=key,
                        error=attribute.get("error"),
                    )
                    pending.discard(key)
                    failed.add(key)

            if not pending:
                break
            if waited >= self.settle.poll_timeout:
                logger.warning(
                    "Timed out waiting for attributes",
                    collection_id=collection_id,
                    pending=sorted(pending),
                )
                return failed | pending

            await self.sleep(interval)
            waited += interval
            interval = min(interval * 2, self.settle.MAX_POLL_INTERVAL)

        return failed
