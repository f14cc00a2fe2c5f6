"""Domain services for provisioning, seeding and content publishing."""

from anacan.domain.services.attribute_resizer import AttributeResizer
from anacan.domain.services.content_service import ContentService
from anacan.domain.services.feed_builder import build_rss_feed
from anacan.domain.services.menu_synchronizer import MenuSynchronizer, MenuSyncResult
from anacan.domain.services.offline_sync import OfflineSync, OfflineSyncResult
from anacan.domain.services.resource_operation import ResourceOperationRunner, RetryPolicy
from anacan.domain.services.schema_provisioner import (
    ProvisioningAbortedError,
    SchemaProvisioner,
    SettlePolicy,
)
from anacan.domain.services.seed_loader import SeedLoader
from anacan.domain.services.sitemap_builder import (
    SitemapContent,
    build_fallback_sitemap,
    build_language_sitemap,
    build_robots_txt,
    build_sitemap_index,
)

__all__ = [
    "AttributeResizer",
    "ContentService",
    "MenuSyncResult",
    "MenuSynchronizer",
    "OfflineSync",
    "OfflineSyncResult",
    "ProvisioningAbortedError",
    "ResourceOperationRunner",
    "RetryPolicy",
    "SchemaProvisioner",
    "SeedLoader",
    "SettlePolicy",
    "SitemapContent",
    "build_fallback_sitemap",
    "build_language_sitemap",
    "build_robots_txt",
    "build_rss_feed",
    "build_sitemap_index",
]
