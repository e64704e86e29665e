"""
Bloglist Backend: Blog Validation & Normalization
==================================================

What:  Turns a candidate BlogCreate into a NewBlog ready for persistence.
How:   Explicit presence checks on the fields the client actually sent.
Who:   Called by the POST /api/blogs route before BlogRepository.create_blog().

Rules:
    title   required; missing, null and "" are all rejected
    url     required; missing, null and "" are all rejected
    likes   absent or null → 0, otherwise passed through
    author  passed through unchanged (absent stays absent)

Pure function: no I/O, no side effects.
"""

from typing import List

from bloglist.exceptions import ValidationError
from bloglist.schemas.blog import BlogCreate, NewBlog

REQUIRED_FIELDS = ("title", "url")


def _is_blank(candidate: BlogCreate, field: str) -> bool:
    if field not in candidate.model_fields_set:
        return True
    value = getattr(candidate, field)
    return value is None or value == ""


def normalize_blog(candidate: BlogCreate) -> NewBlog:
    """
    Validate required fields and fill in defaults.

    Args:
        candidate: Decoded request body

    Returns:
        NewBlog with title/url guaranteed non-empty and likes always set

    Raises:
        ValidationError: title or url is missing or empty. `field` names the
            first offending field; context["missing"] lists all of them.
    """
    missing: List[str] = [f for f in REQUIRED_FIELDS if _is_blank(candidate, f)]
    if missing:
        raise ValidationError(
            message=f"Blog validation failed: {', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required",
            field=missing[0],
            context={"missing": missing},
        )

    likes = candidate.likes
    if "likes" not in candidate.model_fields_set or likes is None:
        likes = 0

    return NewBlog(
        title=candidate.title,
        author=candidate.author,
        url=candidate.url,
        likes=likes,
    )
