from blog.db import db
from blog.models.category_model import Category


def get_all():
    return Category.query.order_by(Category.name.asc(), Category.id.asc()).all()


def get_by_ids(category_ids):
    if not category_ids:
        return []
    return Category.query.filter(Category.id.in_(category_ids)).all()


def get_by_slug(slug: str):
    return Category.query.filter_by(slug=slug).first()


def create_category(name, slug):
    category = Category(name=name, slug=slug)
    db.session.add(category)
    db.session.flush()
    return category
