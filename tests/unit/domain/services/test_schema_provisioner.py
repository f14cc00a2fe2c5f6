"""Unit tests for the schema provisioner."""

from collections import deque

import pytest

from anacan.core.config import Settings
from anacan.domain.entities.provisioning import FailureReason, OutcomeStatus
from anacan.domain.entities.schema import (
    AttributeKind,
    AttributeSpec,
    IndexKind,
    IndexSpec,
    PermissionRule,
    SchemaDefinition,
)
from anacan.domain.services.resource_operation import ResourceOperationRunner, RetryPolicy
from anacan.domain.services.schema_provisioner import (
    ProvisioningAbortedError,
    SchemaProvisioner,
    SettlePolicy,
)
from anacan.infrastructure.appwrite.errors import AppwriteError, AppwriteNetworkError

POSTS = SchemaDefinition(
    collection_id="posts",
    display_name="Posts",
    permissions=(PermissionRule("read", "any"), PermissionRule("create", "users")),
    attributes=(
        AttributeSpec("slug", AttributeKind.STRING, size=255, required=True),
        AttributeSpec("status", AttributeKind.STRING, size=20, default="draft"),
        AttributeSpec("view_count", AttributeKind.INTEGER, default=0),
    ),
    indexes=(
        IndexSpec("idx_slug", IndexKind.UNIQUE, ("slug",)),
        IndexSpec("idx_status", IndexKind.KEY, ("status",)),
    ),
)

CATEGORIES = SchemaDefinition(
    collection_id="categories",
    display_name="Categories",
    permissions=(PermissionRule("read", "any"),),
    attributes=(AttributeSpec("slug", AttributeKind.STRING, size=255, required=True),),
)

FRESH_RUN_DELAYS = [2.0, 1.5, 1.5, 1.5, 2.0, 1.5, 1.5]


def make_provisioner(fake, sleep, settle=None):
    runner = ResourceOperationRunner(RetryPolicy(), sleep=sleep)
    return SchemaProvisioner(fake, "anacan", runner=runner, settle=settle, sleep=sleep)


class TestProvision:
    @pytest.mark.asyncio
    async def test_fresh_database(self, fake_appwrite, recording_sleep):
        provisioner = make_provisioner(fake_appwrite, recording_sleep)

        report = await provisioner.provision([POSTS])

        assert report.created == 1 + 1 + 3 + 2
        assert report.failed == 0
        assert "anacan" in fake_appwrite.databases
        assert fake_appwrite.collections["posts"]["permissions"] == ['read("any")', 'create("users")']
        assert list(fake_appwrite.attributes["posts"]) == ["slug", "status", "view_count"]
        assert list(fake_appwrite.indexes["posts"]) == ["idx_slug", "idx_status"]
        assert recording_sleep.delays == FRESH_RUN_DELAYS

    @pytest.mark.asyncio
    async def test_attributes_created_before_indexes(self, fake_appwrite, recording_sleep):
        await make_provisioner(fake_appwrite, recording_sleep).provision([POSTS])

        methods = [name for name, _ in fake_appwrite.calls]
        last_attribute = max(i for i, name in enumerate(methods) if name == "create_attribute")
        first_index = min(i for i, name in enumerate(methods) if name == "create_index")
        assert last_attribute < first_index

    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(self, fake_appwrite, recording_sleep):
        provisioner = make_provisioner(fake_appwrite, recording_sleep)
        await provisioner.provision([POSTS, CATEGORIES])
        recording_sleep.delays.clear()
        collections_before = len(fake_appwrite.called("create_collection"))

        report = await provisioner.provision([POSTS, CATEGORIES])

        assert report.created == 0
        assert report.failed == 0
        assert report.skipped == len(report.outcomes)
        assert len(fake_appwrite.called("create_collection")) == collections_before
        assert len(fake_appwrite.indexes["posts"]) == 2
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_existing_collection_gets_missing_attributes(self, fake_appwrite, recording_sleep):
        fake_appwrite.databases["anacan"] = "anacan"
        fake_appwrite.collections["posts"] = {"name": "Posts", "permissions": []}
        fake_appwrite.attributes["posts"]["slug"] = {"key": "slug", "status": "available"}
        fake_appwrite.indexes["posts"]["idx_slug"] = {"key": "idx_slug"}

        report = await make_provisioner(fake_appwrite, recording_sleep).provision([POSTS])

        statuses = {o.resource_id: o.status for o in report.outcomes}
        assert statuses["posts"] == OutcomeStatus.ALREADY_EXISTS
        assert statuses["posts.slug"] == OutcomeStatus.ALREADY_EXISTS
        assert statuses["posts.status"] == OutcomeStatus.CREATED
        assert statuses["posts.idx_slug"] == OutcomeStatus.ALREADY_EXISTS
        assert statuses["posts.idx_status"] == OutcomeStatus.CREATED
        assert recording_sleep.delays == [1.5, 1.5, 2.0, 1.5]

    @pytest.mark.asyncio
    async def test_failed_attribute_skips_dependent_index(self, fake_appwrite, recording_sleep):
        fake_appwrite.fail_next("create_attribute", AppwriteError("Invalid size", code=400))

        report = await make_provisioner(fake_appwrite, recording_sleep).provision([POSTS])

        outcomes = {o.resource_id: o for o in report.outcomes}
        assert outcomes["posts.slug"].reason == FailureReason.OTHER
        assert outcomes["posts.status"].status == OutcomeStatus.CREATED
        assert outcomes["posts.idx_slug"].status == OutcomeStatus.FAILED
        assert outcomes["posts.idx_slug"].attempts == 0
        assert "slug" in outcomes["posts.idx_slug"].error
        assert outcomes["posts.idx_status"].status == OutcomeStatus.CREATED
        assert [args[2] for args in fake_appwrite.called("create_index")] == ["idx_status"]

    @pytest.mark.asyncio
    async def test_database_failure_aborts(self, fake_appwrite, recording_sleep):
        fake_appwrite.fail_next("create_database", AppwriteError("Unauthorized", code=401))

        with pytest.raises(ProvisioningAbortedError) as exc_info:
            await make_provisioner(fake_appwrite, recording_sleep).provision([POSTS])

        assert "anacan" in exc_info.value.message
        assert exc_info.value.outcome.reason == FailureReason.OTHER
        assert exc_info.value.report.failed == 1
        assert fake_appwrite.called("create_collection") == []

    @pytest.mark.asyncio
    async def test_collection_failure_aborts_remaining_collections(
        self, fake_appwrite, recording_sleep
    ):
        fake_appwrite.fail_next("create_collection", AppwriteError("Invalid permissions", code=400))

        with pytest.raises(ProvisioningAbortedError) as exc_info:
            await make_provisioner(fake_appwrite, recording_sleep).provision([POSTS, CATEGORIES])

        assert exc_info.value.outcome.resource_id == "posts"
        assert "categories" not in fake_appwrite.collections
        assert fake_appwrite.called("create_attribute") == []

    @pytest.mark.asyncio
    async def test_collection_network_failure_is_skipped(self, fake_appwrite, recording_sleep):
        fake_appwrite.fail_next(
            "create_collection",
            *[AppwriteNetworkError("Connection reset") for _ in range(3)],
        )

        report = await make_provisioner(fake_appwrite, recording_sleep).provision(
            [POSTS, CATEGORIES]
        )

        posts = next(o for o in report.outcomes if o.resource_id == "posts")
        assert posts.reason == FailureReason.NETWORK
        assert posts.attempts == 3
        assert fake_appwrite.attributes["posts"] == {}
        assert "categories" in fake_appwrite.collections
        assert "slug" in fake_appwrite.attributes["categories"]

    @pytest.mark.asyncio
    async def test_transient_attribute_failure_is_retried(self, fake_appwrite, recording_sleep):
        fake_appwrite.fail_next("create_attribute", AppwriteNetworkError("Timed out"))

        report = await make_provisioner(fake_appwrite, recording_sleep).provision([POSTS])

        slug = next(o for o in report.outcomes if o.resource_id == "posts.slug")
        assert slug.status == OutcomeStatus.CREATED
        assert slug.attempts == 2
        assert report.failed == 0


class TestAttributePolling:
    @pytest.mark.asyncio
    async def test_polling_replaces_index_barrier(self, fake_appwrite, recording_sleep):
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["processing", "processing"])
        settle = SettlePolicy(poll_attributes=True)

        await make_provisioner(fake_appwrite, recording_sleep, settle).provision([POSTS])

        assert recording_sleep.delays == [2.0, 1.5, 1.5, 1.5, 0.5, 1.0, 1.5, 1.5]
        assert len(fake_appwrite.indexes["posts"]) == 2

    @pytest.mark.asyncio
    async def test_poll_interval_doubles_up_to_cap(self, fake_appwrite, recording_sleep):
        fake_appwrite.attributes["posts"]["slug"] = {"key": "slug", "status": "available"}
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["processing"] * 7)
        provisioner = make_provisioner(
            fake_appwrite, recording_sleep, SettlePolicy(poll_attributes=True, poll_timeout=100)
        )

        unavailable = await provisioner.wait_for_attributes("posts", ["slug"])

        assert unavailable == set()
        assert recording_sleep.delays == [0.5, 1.0, 2.0, 4.0, 8.0, 8.0, 8.0]

    @pytest.mark.asyncio
    async def test_poll_timeout(self, fake_appwrite, recording_sleep):
        fake_appwrite.attributes["posts"]["slug"] = {"key": "slug", "status": "available"}
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["processing"] * 10)
        provisioner = make_provisioner(
            fake_appwrite, recording_sleep, SettlePolicy(poll_attributes=True, poll_timeout=1.0)
        )

        unavailable = await provisioner.wait_for_attributes("posts", ["slug"])

        assert unavailable == {"slug"}
        assert recording_sleep.delays == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_failed_attribute_stops_polling(self, fake_appwrite, recording_sleep):
        fake_appwrite.attributes["posts"]["slug"] = {"key": "slug", "status": "available"}
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["failed"])
        provisioner = make_provisioner(fake_appwrite, recording_sleep, SettlePolicy(poll_attributes=True))

        assert await provisioner.wait_for_attributes("posts", ["slug"]) == {"slug"}
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_index_skipped_when_attribute_never_available(self, fake_appwrite, recording_sleep):
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["processing"] * 50)
        settle = SettlePolicy(poll_attributes=True, poll_timeout=1.0)

        report = await make_provisioner(fake_appwrite, recording_sleep, settle).provision([POSTS])

        outcomes = {o.resource_id: o for o in report.outcomes}
        assert outcomes["posts.idx_slug"].status == OutcomeStatus.FAILED
        assert outcomes["posts.idx_slug"].reason == FailureReason.OTHER
        assert outcomes["posts.idx_slug"].attempts == 0
        assert outcomes["posts.idx_status"].status == OutcomeStatus.CREATED
        assert [args[2] for args in fake_appwrite.called("create_index")] == ["idx_status"]

    @pytest.mark.asyncio
    async def test_index_skipped_when_attribute_build_failed(self, fake_appwrite, recording_sleep):
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["failed"])
        settle = SettlePolicy(poll_attributes=True)

        report = await make_provisioner(fake_appwrite, recording_sleep, settle).provision([POSTS])

        outcomes = {o.resource_id: o for o in report.outcomes}
        assert outcomes["posts.idx_slug"].status == OutcomeStatus.FAILED
        assert "slug" in outcomes["posts.idx_slug"].error
        assert [args[2] for args in fake_appwrite.called("create_index")] == ["idx_status"]

    @pytest.mark.asyncio
    async def test_existing_attributes_are_polled_before_indexes(self, fake_appwrite, recording_sleep):
        fake_appwrite.databases["anacan"] = "anacan"
        fake_appwrite.collections["posts"] = {"name": "Posts", "permissions": []}
        for key in ("slug", "status", "view_count"):
            fake_appwrite.attributes["posts"][key] = {"key": key, "status": "available"}
        fake_appwrite.attribute_statuses["posts.slug"] = deque(["processing"])
        settle = SettlePolicy(poll_attributes=True)

        report = await make_provisioner(fake_appwrite, recording_sleep, settle).provision([POSTS])

        assert report.failed == 0
        assert recording_sleep.delays == [0.5, 1.5, 1.5]
        methods = [name for name, _ in fake_appwrite.calls]
        assert methods.index("get_attribute") < methods.index("create_index")
        assert len(fake_appwrite.indexes["posts"]) == 2


def test_settle_policy_from_settings():
    settings = Settings(
        _env_file=None,
        collection_settle_delay=1.0,
        attribute_settle_delay=0.5,
        index_barrier_delay=3.0,
        index_settle_delay=0.25,
        poll_attribute_status=True,
        attribute_poll_timeout=10,
    )

    policy = SettlePolicy.from_settings(settings)

    assert policy == SettlePolicy(
        collection_delay=1.0,
        attribute_delay=0.5,
        index_barrier_delay=3.0,
        index_delay=0.25,
        poll_attributes=True,
        poll_timeout=10,
    )
