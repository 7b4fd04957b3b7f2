from blog.extensions.extensions import ma


class UserSchema(ma.Schema):
    id = ma.Int()
    name = ma.Str()
    email = ma.Str()
    avatar = ma.Str(allow_none=True)
    bio = ma.Str(allow_none=True)
    created_at = ma.DateTime(data_key="createdAt")


class CategorySchema(ma.Schema):
    id = ma.Int()
    name = ma.Str()
    slug = ma.Str()
    created_at = ma.DateTime(data_key="createdAt")


class PostCategorySchema(ma.Schema):
    category = ma.Nested(CategorySchema)


class CommentSchema(ma.Schema):
    id = ma.Int()
    content = ma.Str()
    post_id = ma.Int(data_key="postId")
    author_id = ma.Int(data_key="authorId")
    created_at = ma.DateTime(data_key="createdAt")


class CommentWithAuthorSchema(CommentSchema):
    author = ma.Nested(UserSchema)


class PostSchema(ma.Schema):
    id = ma.Int()
    title = ma.Str()
    slug = ma.Str()
    excerpt = ma.Str(allow_none=True)
    content = ma.Str()
    cover_image = ma.Str(allow_none=True, data_key="coverImage")
    author_id = ma.Int(data_key="authorId")
    published_at = ma.DateTime(allow_none=True, data_key="publishedAt")
    created_at = ma.DateTime(data_key="createdAt")
    updated_at = ma.DateTime(data_key="updatedAt")


class PostWithRelationsSchema(PostSchema):
    author = ma.Nested(UserSchema)
    post_categories = ma.List(
        ma.Nested(PostCategorySchema), data_key="postCategories"
    )
    comments = ma.List(ma.Nested(CommentWithAuthorSchema))


class PostInputSchema(ma.Schema):
    """Maps the camelCase request body onto service field names.

    Only keys present in the body come through; rules are checked by the
    post service.
    """
    class Meta:
        unknown = "exclude"

    title = ma.Raw(allow_none=True)
    slug = ma.Raw(allow_none=True)
    excerpt = ma.Raw(allow_none=True)
    content = ma.Raw(allow_none=True)
    cover_image = ma.Raw(allow_none=True, data_key="coverImage")
    author_id = ma.Raw(data_key="authorId")
    published_at = ma.Raw(allow_none=True, data_key="publishedAt")
    category_ids = ma.Raw(allow_none=True, data_key="categoryIds")
