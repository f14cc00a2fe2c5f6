"""Rebuild attributes whose remote definition drifted from the catalog.

The remote service cannot change the size of an existing string attribute,
so the attribute is deleted and created again from its declared
specification. Data stored in the attribute is lost.
"""

import asyncio
from functools import partial

from anacan.core.logging import get_logger
from anacan.domain.entities.provisioning import ProvisioningReport
from anacan.domain.entities.schema import SchemaDefinition
from anacan.domain.services.resource_operation import ResourceOperationRunner, Sleep
from anacan.infrastructure.appwrite.client import AppwriteClient
from anacan.infrastructure.appwrite.errors import AppwriteError

logger = get_logger(__name__)


class AttributeResizer:
    """Deletes and recreates attributes from their declared specification."""

    def __init__(
        self,
        client: AppwriteClient,
        database_id: str,
        runner: ResourceOperationRunner | None = None,
        sleep: Sleep = asyncio.sleep,
        delete_delay: float = 1.0,
        recreate_barrier_delay: float = 2.0,
        create_delay: float = 2.0,
    ) -> None:
        """Initialize the resizer.

        Args:
            client: Remote service client authenticated with an admin key.
            database_id: Database holding the collection.
            runner: Retry-wrapped operation runner used for recreation.
            sleep: Awaitable sleep function, injectable for tests.
            delete_delay: Pause after each deletion.
            recreate_barrier_delay: Pause between the deletions and the first creation.
            create_delay: Pause after each creation.
        """
        self.client = client
        self.database_id = database_id
        self.runner = runner or ResourceOperationRunner(sleep=sleep)
        self.sleep = sleep
        self.delete_delay = delete_delay
        self.recreate_barrier_delay = recreate_barrier_delay
        self.create_delay = create_delay

    async def rebuild(self, definition: SchemaDefinition, keys: list[str]) -> ProvisioningReport:
        """Delete the given attributes and create them again.

        Args:
            definition: Collection holding the attributes.
            keys: Attribute keys to rebuild, in order.

        Returns:
            ProvisioningReport: Recreation outcome per attribute.

        Raises:
            KeyError: If a key is not declared on the collection.
            AppwriteError: If a deletion fails for a reason other than the
                attribute being absent.
        """
        specs = [definition.attribute(key) for key in keys]
        collection_id = definition.collection_id

        for spec in specs:
            try:
                await self.client.delete_attribute(self.database_id, collection_id, spec.key)
                logger.info("Attribute deleted", collection_id=collection_id, key=spec.key)
                await self.sleep(self.delete_delay)
            except AppwriteError as e:
                if not e.is_not_found:
                    raise
                logger.info("Attribute does not exist", collection_id=collection_id, key=spec.key)

        await self.sleep(self.recreate_barrier_delay)

        report = ProvisioningReport()
        for spec in specs:
            outcome = report.add(
                await self.runner.run(
                    "attribute",
                    f"{collection_id}.{spec.key}",
                    create=partial(self.client.create_attribute, self.database_id, collection_id, spec),
                )
            )
            if outcome.succeeded:
                logger.info(
                    "Attribute recreated",
                    collection_id=collection_id,
                    key=spec.key,
                    size=spec.effective_size,
                )
                await self.sleep(self.create_delay)
        return report
