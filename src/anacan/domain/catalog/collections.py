"""Declared schema of every collection used by the blog.

Collections are provisioned in the order they appear in ``COLLECTIONS``.
"""

from typing import Any

from anacan.domain.entities.schema import (
    MAX_STRING_SIZE,
    AttributeKind,
    AttributeSpec,
    IndexKind,
    IndexSpec,
    PermissionRule,
    SchemaDefinition,
)

# Length of a generated document ID
ID_SIZE = 36


def string(key: str, size: int | None = None, required: bool = False, default: Any = None) -> AttributeSpec:
    return AttributeSpec(key, AttributeKind.STRING, size=size, required=required, default=default)


def integer(key: str, required: bool = False, default: int | None = None) -> AttributeSpec:
    return AttributeSpec(key, AttributeKind.INTEGER, required=required, default=default)


def boolean(key: str, required: bool = False, default: bool | None = None) -> AttributeSpec:
    return AttributeSpec(key, AttributeKind.BOOLEAN, required=required, default=default)


def date_time(key: str, required: bool = False) -> AttributeSpec:
    return AttributeSpec(key, AttributeKind.DATETIME, required=required)


def email(key: str, required: bool = False) -> AttributeSpec:
    return AttributeSpec(key, AttributeKind.EMAIL, required=required)


def reference(key: str, required: bool = True) -> AttributeSpec:
    """String attribute holding another document's ID."""
    return string(key, ID_SIZE, required=required)


def key_index(key: str, *attributes: str) -> IndexSpec:
    return IndexSpec(key, IndexKind.KEY, tuple(attributes))


def unique_index(key: str, *attributes: str) -> IndexSpec:
    return IndexSpec(key, IndexKind.UNIQUE, tuple(attributes))


PUBLIC_CONTENT = (
    PermissionRule("read", "any"),
    PermissionRule("create", "users"),
    PermissionRule("update", "users"),
    PermissionRule("delete", "users"),
)

PUBLIC_APPEND_ONLY = (
    PermissionRule("read", "any"),
    PermissionRule("create", "users"),
    PermissionRule("delete", "users"),
)

PRIVATE_APPEND_ONLY = (
    PermissionRule("read", "users"),
    PermissionRule("create", "users"),
    PermissionRule("delete", "users"),
)

PRIVATE_CONTENT = (
    PermissionRule("read", "users"),
    PermissionRule("create", "users"),
    PermissionRule("update", "users"),
    PermissionRule("delete", "users"),
)


CATEGORIES = SchemaDefinition(
    collection_id="categories",
    display_name="Categories",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("slug", 255, required=True),
        string("name_az", 255, required=True),
        string("name_ru", 255, required=True),
        string("icon", 50),
        string("color", 100),
    ),
    indexes=(key_index("idx_slug", "slug"),),
)

TAGS = SchemaDefinition(
    collection_id="tags",
    display_name="Tags",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("slug", 255, required=True),
        string("name_az", 255, required=True),
        string("name_ru", 255, required=True),
    ),
    indexes=(key_index("idx_slug", "slug"),),
)

POSTS = SchemaDefinition(
    collection_id="posts",
    display_name="Posts",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("slug", 255, required=True),
        string("title_az", required=True),
        string("title_ru", required=True),
        string("excerpt_az"),
        string("excerpt_ru"),
        string("content_az", MAX_STRING_SIZE, required=True),
        string("content_ru", MAX_STRING_SIZE, required=True),
        reference("category_id", required=False),
        reference("author_id"),
        string("author_name", 255),
        date_time("published_at"),
        string("image_url"),
        integer("read_time", default=5),
        boolean("is_featured", default=False),
        string("status", 20, default="draft"),
        integer("view_count", default=0),
    ),
    indexes=(
        key_index("idx_slug", "slug"),
        key_index("idx_category", "category_id"),
        key_index("idx_status", "status"),
        key_index("idx_published", "published_at"),
        key_index("idx_featured", "is_featured"),
        key_index("idx_author", "author_id"),
    ),
)

USER_PROFILES = SchemaDefinition(
    collection_id="user_profiles",
    display_name="User Profiles",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("username", 100),
        string("full_name", 255),
        string("avatar_url"),
        string("bio"),
        string("role", 20, default="user"),
        email("email"),
    ),
    indexes=(
        key_index("idx_username", "username"),
        key_index("idx_role", "role"),
    ),
)

COMMENTS = SchemaDefinition(
    collection_id="comments",
    display_name="Comments",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("post_id"),
        reference("user_id"),
        reference("parent_id", required=False),
        string("content", required=True),
        boolean("is_approved", default=True),
    ),
    indexes=(
        key_index("idx_post", "post_id"),
        key_index("idx_parent", "parent_id"),
        key_index("idx_user", "user_id"),
    ),
)

COMMENT_REACTIONS = SchemaDefinition(
    collection_id="comment_reactions",
    display_name="Comment Reactions",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("comment_id"),
        reference("user_id"),
        string("reaction_type", 20, required=True),
    ),
    indexes=(
        key_index("idx_comment", "comment_id"),
        key_index("idx_user", "user_id"),
    ),
)

POST_LIKES = SchemaDefinition(
    collection_id="post_likes",
    display_name="Post Likes",
    permissions=PUBLIC_APPEND_ONLY,
    attributes=(reference("post_id"), reference("user_id")),
    indexes=(
        key_index("idx_post", "post_id"),
        key_index("idx_user", "user_id"),
    ),
)

BOOKMARKS = SchemaDefinition(
    collection_id="bookmarks",
    display_name="Bookmarks",
    permissions=PRIVATE_APPEND_ONLY,
    attributes=(reference("post_id"), reference("user_id")),
    indexes=(
        key_index("idx_post", "post_id"),
        key_index("idx_user", "user_id"),
    ),
)

POST_TAGS = SchemaDefinition(
    collection_id="post_tags",
    display_name="Post Tags",
    permissions=PUBLIC_APPEND_ONLY,
    attributes=(reference("post_id"), reference("tag_id")),
    indexes=(
        key_index("idx_post", "post_id"),
        key_index("idx_tag", "tag_id"),
    ),
)

NEWSLETTER_SUBSCRIPTIONS = SchemaDefinition(
    collection_id="newsletter_subscriptions",
    display_name="Newsletter Subscriptions",
    # Public read lets the signup form check for duplicates
    permissions=(
        PermissionRule("read", "any"),
        PermissionRule("create", "any"),
        PermissionRule("update", "users"),
        PermissionRule("delete", "users"),
    ),
    attributes=(
        email("email", required=True),
        string("name", 255),
        string("surname", 255),
        boolean("is_active", default=True),
        date_time("subscribed_at"),
        date_time("unsubscribed_at"),
    ),
    indexes=(key_index("idx_email", "email"),),
)

READING_HISTORY = SchemaDefinition(
    collection_id="reading_history",
    display_name="Reading History",
    permissions=PRIVATE_CONTENT,
    attributes=(
        reference("user_id"),
        reference("post_id"),
        date_time("read_at"),
    ),
    indexes=(
        key_index("idx_user", "user_id"),
        key_index("idx_post", "post_id"),
    ),
)

AD_SPACES = SchemaDefinition(
    collection_id="ad_spaces",
    display_name="Ad Spaces",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("name", 255, required=True),
        string("slug", 255, required=True),
        string("description"),
        string("position", 50, required=True),
        integer("width"),
        integer("height"),
        boolean("is_active", default=True),
    ),
    indexes=(
        key_index("idx_slug", "slug"),
        key_index("idx_position", "position"),
    ),
)

ADS = SchemaDefinition(
    collection_id="ads",
    display_name="Ads",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("ad_space_id"),
        string("title", 255, required=True),
        string("type", 50, required=True),
        string("content"),
        string("image_url"),
        string("video_url"),
        string("link_url"),
        date_time("start_date"),
        date_time("end_date"),
        boolean("is_active", default=True),
        integer("click_count", default=0),
        integer("impression_count", default=0),
    ),
    indexes=(
        key_index("idx_ad_space", "ad_space_id"),
        key_index("idx_is_active", "is_active"),
    ),
)

TRANSLATIONS = SchemaDefinition(
    collection_id="translations",
    display_name="Translations",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("key", 255, required=True),
        string("namespace", 100, required=True),
        string("value_az", required=True),
        string("value_ru", required=True),
        string("description"),
    ),
    indexes=(
        key_index("idx_key_namespace", "key", "namespace"),
        key_index("idx_namespace", "namespace"),
    ),
)

SITE_SETTINGS = SchemaDefinition(
    collection_id="site_settings",
    display_name="Site Settings",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("key", 255, required=True),
        string("value_az"),
        string("value_ru"),
        string("value_json"),
        string("setting_type", 50, required=True),
    ),
    indexes=(key_index("idx_key", "key"),),
)

MENUS = SchemaDefinition(
    collection_id="menus",
    display_name="Menus",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("name", 255, required=True),
        # header or footer
        string("location", 50, required=True),
        # JSON encoded list of menu items
        string("items", MAX_STRING_SIZE),
        integer("order"),
    ),
    indexes=(key_index("idx_location", "location"),),
)

PAGES = SchemaDefinition(
    collection_id="pages",
    display_name="Pages",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("slug", 255, required=True),
        string("title_az", 500, required=True),
        string("title_ru", 500, required=True),
        string("content_az", MAX_STRING_SIZE, required=True),
        string("content_ru", MAX_STRING_SIZE, required=True),
        string("meta_title_az", 500),
        string("meta_title_ru", 500),
        string("meta_description_az", 500),
        string("meta_description_ru", 500),
        boolean("is_published"),
        integer("order"),
    ),
    indexes=(unique_index("idx_slug", "slug"),),
)

STORIES = SchemaDefinition(
    collection_id="stories",
    display_name="Stories",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("title_az", 500),
        string("title_ru", 500),
        string("image_url", 2048, required=True),
        string("link_url", 2048),
        string("link_text_az", 255),
        string("link_text_ru", 255),
        boolean("is_active"),
        integer("order"),
        date_time("expires_at"),
    ),
    indexes=(
        key_index("idx_active", "is_active"),
        key_index("idx_order", "order"),
    ),
)

FOLLOWS = SchemaDefinition(
    collection_id="follows",
    display_name="Follows",
    permissions=PUBLIC_CONTENT,
    attributes=(reference("follower_id"), reference("following_id")),
    indexes=(
        key_index("idx_follower", "follower_id"),
        key_index("idx_following", "following_id"),
    ),
)

USER_ACTIVITIES = SchemaDefinition(
    collection_id="user_activities",
    display_name="User Activities",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("user_id"),
        string("type", 50, required=True),
        reference("target_id"),
        string("target_type", 20, required=True),
        string("metadata", 2000),
    ),
    indexes=(
        key_index("idx_user", "user_id"),
        key_index("idx_type", "type"),
    ),
)

FORUMS = SchemaDefinition(
    collection_id="forums",
    display_name="Forums",
    permissions=PUBLIC_CONTENT,
    attributes=(
        string("name_az", 255, required=True),
        string("name_ru", 255, required=True),
        string("slug", 255, required=True),
        string("description_az", 1000),
        string("description_ru", 1000),
        string("icon", 50),
        string("color", 50),
        boolean("is_active"),
        integer("order"),
    ),
    indexes=(unique_index("idx_slug", "slug"),),
)

FORUM_POSTS = SchemaDefinition(
    collection_id="forum_posts",
    display_name="Forum Posts",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("forum_id"),
        reference("user_id"),
        string("title", 500, required=True),
        string("content", 10000, required=True),
        boolean("is_pinned"),
        boolean("is_solved"),
        boolean("is_closed", default=False),
        integer("view_count"),
        integer("upvote_count"),
        integer("downvote_count"),
        integer("reply_count"),
        date_time("last_reply_at"),
    ),
    indexes=(
        key_index("idx_forum", "forum_id"),
        key_index("idx_user", "user_id"),
    ),
)

READING_LISTS = SchemaDefinition(
    collection_id="reading_lists",
    display_name="Reading Lists",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("user_id"),
        string("name", 255, required=True),
        string("description", 1000),
        boolean("is_public"),
        string("cover_image_url", 500),
        integer("post_count"),
    ),
    indexes=(key_index("idx_user", "user_id"),),
)

READING_LIST_ITEMS = SchemaDefinition(
    collection_id="reading_list_items",
    display_name="Reading List Items",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("list_id"),
        reference("post_id"),
        integer("order"),
    ),
    indexes=(
        key_index("idx_list", "list_id"),
        key_index("idx_post", "post_id"),
    ),
)

FORUM_REPLIES = SchemaDefinition(
    collection_id="forum_replies",
    display_name="Forum Replies",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("forum_post_id"),
        reference("user_id"),
        string("content", 5000, required=True),
        reference("parent_reply_id", required=False),
        boolean("is_helpful"),
        integer("upvote_count"),
    ),
    indexes=(
        key_index("idx_forum_post", "forum_post_id"),
        key_index("idx_user", "user_id"),
        key_index("idx_parent_reply", "parent_reply_id"),
    ),
)

FORUM_VOTES = SchemaDefinition(
    collection_id="forum_votes",
    display_name="Forum Votes",
    permissions=PUBLIC_CONTENT,
    attributes=(
        reference("forum_post_id"),
        reference("user_id"),
        string("vote_type", 20, required=True),
    ),
    indexes=(
        key_index("idx_forum_post", "forum_post_id"),
        key_index("idx_user", "user_id"),
    ),
)


COLLECTIONS: tuple[SchemaDefinition, ...] = (
    CATEGORIES,
    TAGS,
    POSTS,
    USER_PROFILES,
    COMMENTS,
    COMMENT_REACTIONS,
    POST_LIKES,
    BOOKMARKS,
    POST_TAGS,
    NEWSLETTER_SUBSCRIPTIONS,
    READING_HISTORY,
    AD_SPACES,
    ADS,
    TRANSLATIONS,
    SITE_SETTINGS,
    MENUS,
    PAGES,
    STORIES,
    FOLLOWS,
    USER_ACTIVITIES,
    FORUMS,
    FORUM_POSTS,
    READING_LISTS,
    READING_LIST_ITEMS,
    FORUM_REPLIES,
    FORUM_VOTES,
)


def get_collection(collection_id: str) -> SchemaDefinition:
    """Look up a declared collection by ID.

    Raises:
        KeyError: If no collection with that ID is declared.
    """
    for definition in COLLECTIONS:
        if definition.collection_id == collection_id:
            return definition
    raise KeyError(collection_id)


def select_collections(collection_ids: list[str] | tuple[str, ...] | None = None) -> list[SchemaDefinition]:
    """Return the declared collections, optionally limited to the given IDs.

    Declared order is kept regardless of the order of ``collection_ids``.
    """
    if not collection_ids:
        return list(COLLECTIONS)
    unknown = [cid for cid in collection_ids if cid not in {d.collection_id for d in COLLECTIONS}]
    if unknown:
        raise KeyError(", ".join(unknown))
    wanted = set(collection_ids)
    return [definition for definition in COLLECTIONS if definition.collection_id in wanted]
