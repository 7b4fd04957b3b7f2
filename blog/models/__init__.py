from blog.models.user_model import User
from blog.models.category_model import Category
from blog.models.post_model import Post
from blog.models.comment_model import Comment
from blog.models.post_category_model import PostCategory

__all__ = ["User", "Category", "Post", "Comment", "PostCategory"]
