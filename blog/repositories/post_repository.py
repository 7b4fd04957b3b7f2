from sqlalchemy import func

from blog.db import db
from blog.models.category_model import Category
from blog.models.post_category_model import PostCategory
from blog.models.post_model import Post
from blog.models.user_model import User


def _recency():
    return func.coalesce(Post.published_at, Post.created_at)


def get_by_id(post_id: int):
    return db.session.get(Post, post_id)


def slug_taken(slug: str, exclude_id=None) -> bool:
    query = Post.query.filter(Post.slug == slug)
    if exclude_id is not None:
        query = query.filter(Post.id != exclude_id)
    return query.first() is not None


def get_rows(post_id=None, slug=None):
    """(post, author) pairs, newest first; author is None when dangling."""
    query = (
        db.session.query(Post, User)
        .outerjoin(User, User.id == Post.author_id)
    )
    if post_id is not None:
        query = query.filter(Post.id == post_id)
    if slug is not None:
        query = query.filter(Post.slug == slug)

    return query.order_by(_recency().desc(), Post.id.desc()).all()


def get_category_rows(post_ids):
    """(post_id, category) pairs in link order; category is None when dangling."""
    if not post_ids:
        return []

    return (
        db.session.query(PostCategory.post_id, Category)
        .outerjoin(Category, Category.id == PostCategory.category_id)
        .filter(PostCategory.post_id.in_(post_ids))
        .order_by(PostCategory.id.asc())
        .all()
    )


def create_post(**fields):
    post = Post(**fields)
    db.session.add(post)
    db.session.flush()
    return post


def replace_categories(post, category_ids):
    current = {link.category_id: link for link in post.post_categories}
    for category_id, link in current.items():
        if category_id not in category_ids:
            post.post_categories.remove(link)
    for category_id in category_ids:
        if category_id not in current:
            post.post_categories.append(PostCategory(category_id=category_id))
    db.session.flush()


def delete_post(post):
    db.session.delete(post)
    db.session.flush()
