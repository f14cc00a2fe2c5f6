"""Provisioning outcome entities.

Outcomes are used for logging and the end-of-run summary only; they are
never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum


class OutcomeStatus(str, Enum):
    """Result of one remote resource operation."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why a resource operation failed."""

    NETWORK = "network"
    OTHER = "other"


@dataclass(frozen=True)
class ProvisioningOutcome:
    """Tagged result for a single resource.

    Attributes:
        resource_type: database, collection, attribute, index or document.
        resource_id: Identity of the resource, e.g. ``posts.slug``.
        status: Created, AlreadyExists or Failed.
        reason: Failure category, set only when status is FAILED.
        error: Error message, set only when status is FAILED.
        attempts: Number of attempts made.
    """

    resource_type: str
    resource_id: str
    status: OutcomeStatus
    reason: FailureReason | None = None
    error: str | None = None
    attempts: int = 1

    @classmethod
    def created(cls, resource_type: str, resource_id: str, attempts: int = 1) -> "ProvisioningOutcome":
        return cls(resource_type, resource_id, OutcomeStatus.CREATED, attempts=attempts)

    @classmethod
    def already_exists(
        cls, resource_type: str, resource_id: str, attempts: int = 1
    ) -> "ProvisioningOutcome":
        return cls(resource_type, resource_id, OutcomeStatus.ALREADY_EXISTS, attempts=attempts)

    @classmethod
    def failed(
        cls,
        resource_type: str,
        resource_id: str,
        reason: FailureReason,
        error: str,
        attempts: int = 1,
    ) -> "ProvisioningOutcome":
        return cls(
            resource_type,
            resource_id,
            OutcomeStatus.FAILED,
            reason=reason,
            error=error,
            attempts=attempts,
        )

    @property
    def succeeded(self) -> bool:
        """True when the resource exists after the operation."""
        return self.status != OutcomeStatus.FAILED


@dataclass
class ProvisioningReport:
    """Accumulates outcomes of a provisioning or seeding run."""

    outcomes: list[ProvisioningOutcome] = field(default_factory=list)

    def add(self, outcome: ProvisioningOutcome) -> ProvisioningOutcome:
        self.outcomes.append(outcome)
        return outcome

    def extend(self, other: "ProvisioningReport") -> None:
        self.outcomes.extend(other.outcomes)

    def count(self, status: OutcomeStatus, resource_type: str | None = None) -> int:
        return sum(
            1
            for outcome in self.outcomes
            if outcome.status == status
            and (resource_type is None or outcome.resource_type == resource_type)
        )

    @property
    def created(self) -> int:
        return self.count(OutcomeStatus.CREATED)

    @property
    def skipped(self) -> int:
        return self.count(OutcomeStatus.ALREADY_EXISTS)

    @property
    def failed(self) -> int:
        return self.count(OutcomeStatus.FAILED)

    @property
    def failures(self) -> list[ProvisioningOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILED]

    def summary(self) -> str:
        """One-line summary of created, skipped and failed resources."""
        return (
            f"Created: {self.created}  Skipped: {self.skipped}  "
            f"Failed: {self.failed}  Total: {len(self.outcomes)}"
        )
