def _matches(post, needle: str) -> bool:
    haystacks = [
        post["title"],
        post.get("excerpt"),
        post["content"],
        post["author"]["name"],
    ]
    haystacks.extend(
        link["category"]["name"] for link in post.get("post_categories", [])
    )
    return any(text and needle in text.lower() for text in haystacks)


def search_posts(posts, query):
    """Case-insensitive substring filter; a blank query matches nothing."""
    needle = (query or "").strip().lower()
    if not needle:
        return []
    return [post for post in posts if _matches(post, needle)]


def _category_ids(post):
    return {
        link["category"]["id"]
        for link in post.get("post_categories", [])
        if link.get("category")
    }


def related_posts(current_post, all_posts, limit: int = 3):
    if limit <= 0:
        return []

    current_id = current_post["id"]
    current_categories = _category_ids(current_post)

    candidates = [post for post in all_posts if post["id"] != current_id]

    related = [
        post for post in candidates
        if _category_ids(post) & current_categories
    ][:limit]

    if len(related) < limit:
        chosen_ids = {post["id"] for post in related}
        filler = [post for post in candidates if post["id"] not in chosen_ids]
        related.extend(filler[:limit - len(related)])

    return related
