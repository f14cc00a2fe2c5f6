"""Seed loader.

Inserts fixed demonstration documents into provisioned collections. A record
is skipped when a document with the same natural key already exists, and
existing documents are never updated.
"""

from functools import partial
from typing import Iterable

from anacan.core.logging import get_logger
from anacan.domain.entities.provisioning import ProvisioningOutcome, ProvisioningReport
from anacan.domain.entities.seed import SeedRecord
from anacan.domain.services.resource_operation import ResourceOperationRunner
from anacan.infrastructure.appwrite.client import AppwriteClient
from anacan.infrastructure.appwrite.errors import AppwriteError
from anacan.infrastructure.appwrite.query import Query

logger = get_logger(__name__)


class SeedLoader:
    """Creates seed documents that are not present yet."""

    def __init__(
        self,
        client: AppwriteClient,
        database_id: str,
        runner: ResourceOperationRunner | None = None,
    ) -> None:
        self.client = client
        self.database_id = database_id
        self.runner = runner or ResourceOperationRunner()
        self._attributes: dict[str, set[str]] = {}

    async def load(self, records: Iterable[SeedRecord]) -> ProvisioningReport:
        """Create every record whose natural key is not taken.

        A failure on one record is logged and the remaining records are
        still attempted.

        Args:
            records: Seed records in load order.

        Returns:
            ProvisioningReport: One document outcome per record.
        """
        report = ProvisioningReport()
        for record in records:
            report.add(await self.load_record(record))

        logger.info(
            "Seeding finished",
            created=report.created,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    async def load_record(self, record: SeedRecord) -> ProvisioningOutcome:
        available = await self.available_attributes(record) if record.optional_data else None
        return await self.runner.run(
            "document",
            f"{record.collection_id}/{record.label}",
            create=partial(
                self.client.create_document,
                self.database_id,
                record.collection_id,
                record.document(available),
                permissions=[str(rule) for rule in record.permissions] or None,
            ),
            exists=partial(self.exists, record),
        )

    async def exists(self, record: SeedRecord) -> bool:
        """Check whether a document with the record's natural key exists."""
        queries = [Query.equal(key, value) for key, value in record.natural_key.items()]
        queries.append(Query.limit(1))
        response = await self.client.list_documents(
            self.database_id, record.collection_id, queries
        )
        return bool(response.get("documents"))

    async def available_attributes(self, record: SeedRecord) -> set[str]:
        """Attribute keys of the record's collection, fetched once per collection.

        Optional fields are left out when the attributes cannot be listed.
        """
        collection_id = record.collection_id
        if collection_id not in self._attributes:
            try:
                attributes = await self.client.list_attributes(self.database_id, collection_id)
            except AppwriteError as e:
                logger.warning(
                    "Could not list attributes, skipping optional fields",
                    collection_id=collection_id,
                    error=e.message,
                )
                return set()
            self._attributes[collection_id] = {attr["key"] for attr in attributes}
        return self._attributes[collection_id]
