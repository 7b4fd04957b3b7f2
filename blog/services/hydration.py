"""Assemble flat row sets into nested post view models.

Nothing here touches the session: callers hand in rows already fetched,
so the grouping can be exercised with plain objects.
"""
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


def _group_categories(category_rows):
    by_post_id = defaultdict(list)
    for post_id, category in category_rows:
        if category is None:
            continue
        by_post_id[post_id].append({"category": category.to_dict()})
    return by_post_id


def _group_comments(comment_rows):
    by_post_id = defaultdict(list)
    for comment, author in comment_rows:
        if author is None:
            continue
        payload = comment.to_dict()
        payload["author"] = author.to_dict()
        by_post_id[comment.post_id].append(payload)
    return by_post_id


def hydrate_post(post, author, post_categories=None, comments=None):
    if author is None:
        return None

    payload = post.to_dict()
    payload["author"] = author.to_dict()
    payload["post_categories"] = list(post_categories or [])
    payload["comments"] = list(comments or [])
    return payload


def hydrate_posts(post_rows, category_rows, comment_rows):
    """Build post-with-relations dicts from three row sets.

    post_rows: (post, author) pairs in the order to return.
    category_rows: (post_id, category) pairs.
    comment_rows: (comment, author) pairs.

    Posts whose author is missing are left out; category links and
    comments pointing at missing rows are dropped.
    """
    categories_by_post = _group_categories(category_rows)
    comments_by_post = _group_comments(comment_rows)

    result = []
    for post, author in post_rows:
        payload = hydrate_post(
            post,
            author,
            categories_by_post.get(post.id),
            comments_by_post.get(post.id),
        )
        if payload is None:
            logger.warning("Skipping post %s: author %s not found", post.id, post.author_id)
            continue
        result.append(payload)

    return result
