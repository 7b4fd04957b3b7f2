import logging
import re

from sqlalchemy.exc import IntegrityError

from blog.db import db, storage_guard
from blog.errors import ConflictError, ValidationError
from blog.repositories import user_repository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


def normalize_email(email):
    if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email.strip()):
        raise ValidationError("Please enter a valid email", field="email")
    return email.strip().lower()


def _require_name(name):
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required", field="name")
    return name.strip()


def find_or_create_user(email, name):
    """Fetch the user for email or insert one, without committing.

    The insert runs in a savepoint so a concurrent insert of the same
    email surfaces as IntegrityError on the unique column and falls back
    to the row that won.
    """
    email = normalize_email(email)

    user = user_repository.get_by_email(email)
    if user:
        return user

    name = _require_name(name)
    try:
        with db.session.begin_nested():
            user = user_repository.create_user(name=name, email=email)
    except IntegrityError:
        user = user_repository.get_by_email(email)
        if user is None:
            raise ConflictError("Email already exists")
        return user

    logger.info("Created user %s for %s", user.id, email)
    return user


def find_or_create_user_by_email(email, name):
    with storage_guard():
        user = find_or_create_user(email, name)
        db.session.commit()
    return user


def delete_user(user_id: int) -> bool:
    with storage_guard():
        user = user_repository.get_by_id(user_id)
        if not user:
            return False

        if user_repository.count_posts(user.id):
            raise ConflictError("User still authors posts")

        db.session.delete(user)
        db.session.commit()

    logger.info("Deleted user %s", user_id)
    return True
