"""Unit tests for the declared collection catalog."""

import pytest

from anacan.domain.catalog import COLLECTIONS, get_collection, select_collections
from anacan.domain.entities.schema import MAX_STRING_SIZE, IndexKind

EXPECTED_COLLECTIONS = [
    "categories",
    "tags",
    "posts",
    "user_profiles",
    "comments",
    "comment_reactions",
    "post_likes",
    "bookmarks",
    "post_tags",
    "newsletter_subscriptions",
    "reading_history",
    "ad_spaces",
    "ads",
    "translations",
    "site_settings",
    "menus",
    "pages",
    "stories",
    "follows",
    "user_activities",
    "forums",
    "forum_posts",
    "reading_lists",
    "reading_list_items",
    "forum_replies",
    "forum_votes",
]


def test_catalog_declares_every_collection_in_order():
    assert [d.collection_id for d in COLLECTIONS] == EXPECTED_COLLECTIONS


def test_collection_ids_are_unique():
    ids = [d.collection_id for d in COLLECTIONS]

    assert len(ids) == len(set(ids))


def test_every_definition_has_permissions_and_attributes():
    for definition in COLLECTIONS:
        assert definition.permissions, definition.collection_id
        assert definition.attributes, definition.collection_id


def test_post_content_uses_maximum_size():
    posts = get_collection("posts")

    assert posts.attribute("content_az").size == MAX_STRING_SIZE
    assert posts.attribute("content_ru").size == MAX_STRING_SIZE
    assert posts.attribute("content_az").required is True


def test_forum_posts_declare_is_closed():
    attribute = get_collection("forum_posts").attribute("is_closed")

    assert attribute.required is False
    assert attribute.default is False


def test_pages_and_forums_have_unique_slug_index():
    for collection_id in ("pages", "forums"):
        index = {i.key: i for i in get_collection(collection_id).indexes}["idx_slug"]
        assert index.kind == IndexKind.UNIQUE


def test_newsletter_allows_anonymous_signup():
    permissions = get_collection("newsletter_subscriptions").permission_strings

    assert 'read("any")' in permissions
    assert 'create("any")' in permissions


def test_get_collection_unknown():
    with pytest.raises(KeyError):
        get_collection("unknown")


def test_select_collections_defaults_to_all():
    assert select_collections() == list(COLLECTIONS)


def test_select_collections_keeps_declared_order():
    selected = select_collections(["forums", "categories", "posts"])

    assert [d.collection_id for d in selected] == ["categories", "posts", "forums"]


def test_select_collections_rejects_unknown_ids():
    with pytest.raises(KeyError) as exc_info:
        select_collections(["posts", "nope"])

    assert exc_info.value.args[0] == "nope"
