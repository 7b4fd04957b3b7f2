from blog.db import db


class PostCategory(db.Model):
    __tablename__ = "post_categories"

    id = db.Column(db.Integer, primary_key=True)
    post_id = db.Column(
        db.Integer,
        db.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        db.UniqueConstraint(
            "post_id",
            "category_id",
            name="unique_post_category",
        ),
    )
