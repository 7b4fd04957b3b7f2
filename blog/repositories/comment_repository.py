from blog.db import db
from blog.models.comment_model import Comment
from blog.models.user_model import User


def create_comment(author_id, post_id, content):
    comment = Comment(
        author_id=author_id,
        post_id=post_id,
        content=content,
    )
    db.session.add(comment)
    db.session.flush()
    return comment


def get_rows_for_posts(post_ids):
    """(comment, author) pairs, oldest first; author is None when dangling."""
    if not post_ids:
        return []

    return (
        db.session.query(Comment, User)
        .outerjoin(User, User.id == Comment.author_id)
        .filter(Comment.post_id.in_(post_ids))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )

