"""
Response transforms.
"""
from .image_url import IMAGE_FIELDS, IMAGE_ARRAY_FIELDS, resolve_image_url, transform_image_urls_deep

__all__ = [
    "IMAGE_FIELDS",
    "IMAGE_ARRAY_FIELDS",
    "resolve_image_url",
    "transform_image_urls_deep",
]
