"""
WordPress REST API interactions.

Everything that talks to the target site lives in
:mod:`syndicator.publishers.wordpress_publisher`: the duplicate check,
the Media Library upload, tag resolution and draft creation.
"""

from .wordpress_publisher import (
    EXCERPT,
    build_post_payload,
    create_post,
    post_exists,
    resolve_tags,
    upload_featured_image,
)

__all__ = [
    "EXCERPT",
    "build_post_payload",
    "create_post",
    "post_exists",
    "resolve_tags",
    "upload_featured_image",
]
