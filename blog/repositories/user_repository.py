from blog.db import db
from blog.models.post_model import Post
from blog.models.user_model import User


def get_by_id(user_id: int):
    return db.session.get(User, user_id)


def get_by_email(email: str):
    return User.query.filter_by(email=email).first()


def create_user(name, email, avatar=None, bio=None):
    user = User(
        name=name,
        email=email,
        avatar=avatar,
        bio=bio,
    )
    db.session.add(user)
    db.session.flush()
    return user


def count_posts(user_id: int) -> int:
    return Post.query.filter_by(author_id=user_id).count()
