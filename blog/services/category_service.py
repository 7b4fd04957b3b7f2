from sqlalchemy.exc import IntegrityError

from blog.db import db, storage_guard
from blog.errors import ConflictError, NotFoundError, ValidationError
from blog.repositories import category_repository
from blog.services.slug import generate_slug


def list_categories():
    with storage_guard():
        return category_repository.get_all()


def resolve_category_ids(category_ids):
    """Validate a list of category ids; unknown ids raise NotFoundError."""
    if category_ids is None:
        return []
    if not isinstance(category_ids, (list, tuple)) or not all(
        isinstance(value, int) and not isinstance(value, bool) for value in category_ids
    ):
        raise ValidationError("Categories must be a list of ids", field="category_ids")

    unique_ids = list(dict.fromkeys(category_ids))
    found = {category.id for category in category_repository.get_by_ids(unique_ids)}
    missing = [value for value in unique_ids if value not in found]
    if missing:
        raise NotFoundError(f"Category not found: {missing[0]}")
    return unique_ids


def create_category(name, slug=None):
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required", field="name")

    name = name.strip()
    slug = slug or generate_slug(name)
    if not slug:
        raise ValidationError("Slug is required", field="slug")

    with storage_guard():
        if category_repository.get_by_slug(slug):
            raise ConflictError("Category slug already exists")
        try:
            category = category_repository.create_category(name=name, slug=slug)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise ConflictError("Category slug already exists") from e

    return category
