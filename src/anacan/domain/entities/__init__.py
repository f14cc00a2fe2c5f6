"""Domain entities for Anacan.

Entities are pure Python dataclasses that represent core concepts of the
schema provisioning, seeding and content workflows.
"""

from anacan.domain.entities.content import (
    Category,
    Forum,
    ForumPost,
    Page,
    Post,
    parse_timestamp,
)
from anacan.domain.entities.provisioning import (
    FailureReason,
    OutcomeStatus,
    ProvisioningOutcome,
    ProvisioningReport,
)
from anacan.domain.entities.schema import (
    AttributeKind,
    AttributeSpec,
    IndexKind,
    IndexSpec,
    PermissionRule,
    SchemaDefinition,
    SortOrder,
)
from anacan.domain.entities.seed import SeedRecord

__all__ = [
    "AttributeKind",
    "AttributeSpec",
    "Category",
    "FailureReason",
    "Forum",
    "ForumPost",
    "IndexKind",
    "IndexSpec",
    "OutcomeStatus",
    "Page",
    "PermissionRule",
    "Post",
    "ProvisioningOutcome",
    "ProvisioningReport",
    "SchemaDefinition",
    "SeedRecord",
    "SortOrder",
    "parse_timestamp",
]
