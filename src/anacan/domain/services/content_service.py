"""Read access to published content in the remote database."""

import asyncio
from typing import Any

from anacan.domain.entities.content import Category, Forum, ForumPost, Page, Post
from anacan.domain.services.sitemap_builder import SitemapContent
from anacan.infrastructure.appwrite.client import AppwriteClient
from anacan.infrastructure.appwrite.query import Query

# Upper bound of documents fetched for a sitemap
SITEMAP_LIMIT = 10000


class ContentService:
    """Fetches posts, categories, pages and forums as entities."""

    def __init__(self, client: AppwriteClient, database_id: str) -> None:
        self.client = client
        self.database_id = database_id

    async def _list(self, collection_id: str, queries: list[str]) -> list[dict[str, Any]]:
        response = await self.client.list_documents(self.database_id, collection_id, queries)
        return response.get("documents", [])

    async def published_posts(self, limit: int = SITEMAP_LIMIT) -> list[Post]:
        """Published posts, newest first."""
        documents = await self._list(
            "posts",
            [
                Query.equal("status", "published"),
                Query.order_desc("$createdAt"),
                Query.limit(limit),
            ],
        )
        return [Post.from_document(doc) for doc in documents]

    async def categories(self) -> list[Category]:
        documents = await self._list("categories", [Query.order_asc("$createdAt")])
        return [Category.from_document(doc) for doc in documents]

    async def published_pages(self) -> list[Page]:
        documents = await self._list(
            "pages", [Query.equal("is_published", True), Query.order_asc("order")]
        )
        return [Page.from_document(doc) for doc in documents]

    async def active_forums(self) -> list[Forum]:
        documents = await self._list(
            "forums", [Query.equal("is_active", True), Query.order_asc("order")]
        )
        return [Forum.from_document(doc) for doc in documents]

    async def forum_posts(self, limit: int = SITEMAP_LIMIT) -> list[ForumPost]:
        documents = await self._list("forum_posts", [Query.limit(limit)])
        return [ForumPost.from_document(doc) for doc in documents]

    async def sitemap_content(self) -> SitemapContent:
        """Fetch everything listed in a locale sitemap concurrently."""
        posts, categories, pages, forums, forum_posts = await asyncio.gather(
            self.published_posts(),
            self.categories(),
            self.published_pages(),
            self.active_forums(),
            self.forum_posts(),
        )
        return SitemapContent(
            posts=posts,
            categories=categories,
            pages=pages,
            forums=forums,
            forum_posts=forum_posts,
        )
