from blog.db import db, utcnow


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    excerpt = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False)
    cover_image = db.Column(db.Text, nullable=True)

    # no ondelete: a user who still authors posts cannot be removed
    author_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False
    )

    # NULL means draft
    published_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    author = db.relationship("User", lazy="select")

    comments = db.relationship(
        "Comment",
        backref="post",
        lazy="select",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    post_categories = db.relationship(
        "PostCategory",
        backref="post",
        lazy="select",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "content": self.content,
            "cover_image": self.cover_image,
            "author_id": self.author_id,
            "published_at": self.published_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
