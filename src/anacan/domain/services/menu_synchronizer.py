"""Header and footer menu synchronisation.

Builds menu items from the categories and published pages in the remote
database and merges them into the stored menus. Merging only appends items
whose URL is not in the menu yet; existing items are never removed or
rewritten.
"""

import json
from dataclasses import dataclass
from typing import Any

from anacan.core.logging import get_logger
from anacan.domain.entities.content import Category, Page
from anacan.infrastructure.appwrite.client import AppwriteClient
from anacan.infrastructure.appwrite.query import Query

logger = get_logger(__name__)

MenuItem = dict[str, Any]

MENU_NAMES = {"header": "Header Menu", "footer": "Footer Menu"}

# Upper bound on categories and pages turned into menu items
LIST_LIMIT = 100


@dataclass
class MenuSyncResult:
    """Result of synchronising one menu."""

    location: str
    menu_id: str
    created: bool
    added: int
    total: int


def build_header_items(categories: list[Category]) -> list[MenuItem]:
    """Blog and forum links followed by one link per category."""
    items: list[MenuItem] = [
        {
            "id": "blog",
            "label": "Blog",
            "label_az": "Blog",
            "label_ru": "Блог",
            "url": "/blog",
            "target": "_self",
        },
        {
            "id": "forums",
            "label": "Forumlar",
            "label_az": "Forumlar",
            "label_ru": "Форумы",
            "url": "/forums",
            "target": "_self",
        },
    ]
    for category in categories:
        items.append(
            {
                "id": f"cat-{category.id}",
                "label": category.name["az"],
                "label_az": category.name["az"],
                "label_ru": category.name["ru"] or category.name["az"],
                "url": f"/category/{category.slug}",
                "target": "_self",
            }
        )
    return items


def build_footer_items(pages: list[Page]) -> list[MenuItem]:
    """One link per published page."""
    return [
        {
            "id": f"page-{page.id}",
            "label": page.title["az"],
            "label_az": page.title["az"],
            "label_ru": page.title["ru"] or page.title["az"],
            "url": f"/{page.slug}",
            "target": "_self",
        }
        for page in pages
        if page.is_published
    ]


def merge_menu_items(existing: list[MenuItem], items: list[MenuItem]) -> tuple[list[MenuItem], int]:
    """Append items whose URL is not present yet.

    Returns:
        The merged list and the number of items appended.
    """
    merged = list(existing)
    urls = {item.get("url") for item in existing}
    added = 0
    for item in items:
        if item["url"] not in urls:
            merged.append(item)
            urls.add(item["url"])
            added += 1
    return merged, added


def parse_menu_items(raw: str | None) -> list[MenuItem]:
    """Decode the JSON encoded items of a stored menu."""
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except ValueError:
        logger.warning("Stored menu items are not valid JSON, treating as empty")
        return []
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class MenuSynchronizer:
    """Keeps the header and footer menus in step with categories and pages."""

    def __init__(self, client: AppwriteClient, database_id: str) -> None:
        self.client = client
        self.database_id = database_id

    async def sync(self) -> list[MenuSyncResult]:
        """Synchronise the header and the footer menu.

        Raises:
            AppwriteError: If reading or writing a menu fails.
        """
        categories = await self._list("categories", Category)
        pages = await self._list("pages", Page)

        return [
            await self.sync_menu("header", build_header_items(categories)),
            await self.sync_menu("footer", build_footer_items(pages)),
        ]

    async def sync_menu(self, location: str, items: list[MenuItem]) -> MenuSyncResult:
        """Merge items into the menu at a location, creating the menu if needed."""
        response = await self.client.list_documents(
            self.database_id,
            "menus",
            [Query.equal("location", location), Query.limit(1)],
        )
        documents = response.get("documents", [])

        if documents:
            menu = documents[0]
            merged, added = merge_menu_items(parse_menu_items(menu.get("items")), items)
            if added:
                await self.client.update_document(
                    self.database_id,
                    "menus",
                    menu["$id"],
                    {"items": json.dumps(merged, ensure_ascii=False)},
                )
            logger.info("Menu updated", location=location, added=added, total=len(merged))
            return MenuSyncResult(location, menu["$id"], False, added, len(merged))

        menu = await self.client.create_document(
            self.database_id,
            "menus",
            {
                "name": MENU_NAMES.get(location, f"{location.title()} Menu"),
                "location": location,
                "items": json.dumps(items, ensure_ascii=False),
            },
        )
        logger.info("Menu created", location=location, total=len(items))
        return MenuSyncResult(location, menu.get("$id", ""), True, len(items), len(items))

    async def _list(self, collection_id: str, entity: Any) -> list[Any]:
        response = await self.client.list_documents(
            self.database_id, collection_id, [Query.limit(LIST_LIMIT)]
        )
        return [entity.from_document(doc) for doc in response.get("documents", [])]
