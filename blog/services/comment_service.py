import logging

from sqlalchemy.exc import IntegrityError

from blog.db import db, storage_guard
from blog.errors import NotFoundError, ValidationError
from blog.repositories import post_repository, user_repository
from blog.repositories.comment_repository import create_comment
from blog.services.user_service import find_or_create_user

logger = logging.getLogger(__name__)

CONTENT_MIN_LENGTH = 10
NAME_MIN_LENGTH = 2


def _validate_content(content):
    if not isinstance(content, str) or not content.strip() or len(content) < CONTENT_MIN_LENGTH:
        raise ValidationError(
            f"Comment must be at least {CONTENT_MIN_LENGTH} characters",
            field="content",
        )
    return content


def _validate_name(name):
    if not isinstance(name, str) or len(name.strip()) < NAME_MIN_LENGTH:
        raise ValidationError(
            f"Name must be at least {NAME_MIN_LENGTH} characters", field="name"
        )
    return name.strip()


def _ensure_post_exists(post_id):
    if not post_repository.get_by_id(post_id):
        raise NotFoundError("Post not found")


def add_comment(post_id, author_id, content):
    content = _validate_content(content)

    with storage_guard():
        _ensure_post_exists(post_id)
        if not user_repository.get_by_id(author_id):
            raise NotFoundError("User not found")

        try:
            comment = create_comment(
                author_id=author_id,
                post_id=post_id,
                content=content,
            )
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise NotFoundError("Post not found") from e

    logger.info("Added comment %s to post %s", comment.id, post_id)
    return comment


def submit_comment(post_id, name, email, content):
    """Public comment form: find or create the commenter, then comment.

    Both writes commit together; on any failure neither is kept.
    """
    name = _validate_name(name)
    content = _validate_content(content)

    with storage_guard():
        _ensure_post_exists(post_id)
        try:
            user = find_or_create_user(email, name)
            comment = create_comment(
                author_id=user.id,
                post_id=post_id,
                content=content,
            )
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise NotFoundError("Post not found") from e
        except Exception:
            db.session.rollback()
            raise

    logger.info("Added comment %s to post %s", comment.id, post_id)
    return comment
