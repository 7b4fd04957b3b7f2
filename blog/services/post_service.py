import logging
import re
from datetime import datetime, timedelta, timezone
from urllib.parse import urlparse

from sqlalchemy.exc import IntegrityError

from blog.db import db, storage_guard, utcnow
from blog.errors import ConflictError, NotFoundError, ValidationError
from blog.repositories import comment_repository, post_repository, user_repository
from blog.services.category_service import resolve_category_ids
from blog.services.hydration import hydrate_posts

logger = logging.getLogger(__name__)


TITLE_MIN_LENGTH = 5
CONTENT_MIN_LENGTH = 50
SLUG_MIN_LENGTH = 3
SLUG_PATTERN = re.compile(r"[a-z0-9-]+")

POST_FIELDS = (
    "title",
    "slug",
    "excerpt",
    "content",
    "cover_image",
    "author_id",
    "published_at",
    "category_ids",
)

_MISSING = object()


def _validate_title(value):
    if not isinstance(value, str) or not value.strip() or len(value) < TITLE_MIN_LENGTH:
        raise ValidationError(
            f"Title must be at least {TITLE_MIN_LENGTH} characters", field="title"
        )
    return value


def _validate_slug(value):
    if not isinstance(value, str) or len(value) < SLUG_MIN_LENGTH:
        raise ValidationError(
            f"Slug must be at least {SLUG_MIN_LENGTH} characters", field="slug"
        )
    if not SLUG_PATTERN.fullmatch(value):
        raise ValidationError(
            "Slug can only contain lowercase letters, numbers, and hyphens",
            field="slug",
        )
    return value


def _validate_content(value):
    if not isinstance(value, str) or not value.strip() or len(value) < CONTENT_MIN_LENGTH:
        raise ValidationError(
            f"Content must be at least {CONTENT_MIN_LENGTH} characters", field="content"
        )
    return value


def _validate_excerpt(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("Excerpt must be a string", field="excerpt")
    return value


def _validate_cover_image(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("Must be a valid URL", field="cover_image")

    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("Must be a valid URL", field="cover_image")
    return value.strip()


def _validate_author_id(value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError("Author is required", field="author_id")
    return value


def _validate_published_at(value):
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError("Invalid publish date", field="published_at")
    if not isinstance(value, datetime):
        raise ValidationError("Invalid publish date", field="published_at")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


_VALIDATORS = {
    "title": _validate_title,
    "slug": _validate_slug,
    "excerpt": _validate_excerpt,
    "content": _validate_content,
    "cover_image": _validate_cover_image,
    "author_id": _validate_author_id,
    "published_at": _validate_published_at,
    "category_ids": lambda value: value,
}


def _clean(data, required=()):
    if not isinstance(data, dict):
        raise ValidationError("Invalid post data")

    unknown = sorted(set(data) - set(POST_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown field: {unknown[0]}", field=unknown[0])

    cleaned = {}
    for field in POST_FIELDS:
        value = data.get(field, _MISSING)
        if value is _MISSING:
            if field in required:
                _VALIDATORS[field](None)
            continue
        cleaned[field] = _VALIDATORS[field](value)
    return cleaned


def _ensure_author_exists(author_id):
    if not user_repository.get_by_id(author_id):
        raise NotFoundError("Author not found")


def _load_hydrated(post_rows):
    post_ids = [post.id for post, _ in post_rows]
    return hydrate_posts(
        post_rows,
        post_repository.get_category_rows(post_ids),
        comment_repository.get_rows_for_posts(post_ids),
    )


def list_posts():
    with storage_guard():
        return _load_hydrated(post_repository.get_rows())


def get_post_by_id(post_id: int):
    with storage_guard():
        posts = _load_hydrated(post_repository.get_rows(post_id=post_id))
    return posts[0] if posts else None


def get_post_by_slug(slug: str):
    if not isinstance(slug, str) or not slug:
        return None
    with storage_guard():
        posts = _load_hydrated(post_repository.get_rows(slug=slug))
    return posts[0] if posts else None


def create_post(data):
    cleaned = _clean(
        data,
        required=("title", "slug", "content", "author_id"),
    )

    category_ids = cleaned.pop("category_ids", None)
    cleaned.setdefault("published_at", utcnow())

    with storage_guard():
        _ensure_author_exists(cleaned["author_id"])
        category_ids = resolve_category_ids(category_ids)

        if post_repository.slug_taken(cleaned["slug"]):
            logger.warning("Rejected duplicate slug %s", cleaned["slug"])
            raise ConflictError("Slug already exists")

        now = utcnow()
        try:
            post = post_repository.create_post(
                created_at=now,
                updated_at=now,
                **cleaned,
            )
            if category_ids:
                post_repository.replace_categories(post, category_ids)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.warning("Rejected duplicate slug %s", cleaned["slug"])
            raise ConflictError("Slug already exists") from e

    logger.info("Created post %s (%s)", post.id, post.slug)
    return post


def _next_updated_at(previous):
    now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def update_post(post_id: int, data):
    cleaned = _clean(data)

    with storage_guard():
        post = post_repository.get_by_id(post_id)
        if not post:
            return None

        if "author_id" in cleaned:
            _ensure_author_exists(cleaned["author_id"])

        category_ids = _MISSING
        if "category_ids" in cleaned:
            category_ids = resolve_category_ids(cleaned.pop("category_ids"))

        slug = cleaned.get("slug")
        if slug is not None and post_repository.slug_taken(slug, exclude_id=post.id):
            logger.warning("Rejected duplicate slug %s", slug)
            raise ConflictError("Slug already exists")

        try:
            for field, value in cleaned.items():
                setattr(post, field, value)
            if category_ids is not _MISSING:
                post_repository.replace_categories(post, category_ids)
            post.updated_at = _next_updated_at(post.updated_at)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise ConflictError("Slug already exists") from e

    logger.info("Updated post %s", post.id)
    return post


def delete_post(post_id: int) -> bool:
    with storage_guard():
        post = post_repository.get_by_id(post_id)
        if not post:
            return False

        post_repository.delete_post(post)
        db.session.commit()

    logger.info("Deleted post %s", post_id)
    return True
