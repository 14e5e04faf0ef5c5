"""
Image URL resolution.

The backend stores bare filenames for images; clients need absolute URLs.
Every transport response is passed through `transform_image_urls_deep`
before a repository sees it.
"""
from typing import Any, FrozenSet, Optional

# Keys whose string value is an image reference
IMAGE_FIELDS: FrozenSet[str] = frozenset({
    "mainImage",
    "coverImage",
    "backgroundImage",
    "image",
})

# Keys holding a list of {"url": ...} objects
IMAGE_ARRAY_FIELDS: FrozenSet[str] = frozenset({"images"})

ABSOLUTE_URL_PREFIXES = ("http://", "https://")


def resolve_image_url(value: Optional[str], cdn_url: str) -> Optional[str]:
    """
    Turn a bare filename into a CDN URL.

    None stays None and absolute http(s) URLs are returned unchanged, so
    resolving twice is the same as resolving once. An empty string is
    treated like any other filename and yields ``cdn_url + "/"``.
    """
    if value is None:
        return None
    if value.startswith(ABSOLUTE_URL_PREFIXES):
        return value
    return f"{cdn_url}/{value}"


def transform_image_urls_deep(data: Any, cdn_url: str) -> Any:
    """
    Return a copy of `data` with every recognised image field resolved.

    Walks dicts and lists without a depth limit. The input is never
    mutated; scalars and unrecognised keys pass through as-is.
    """
    if data is None:
        return None

    if isinstance(data, list):
        return [transform_image_urls_deep(item, cdn_url) for item in data]

    if not isinstance(data, dict):
        return data

    result = {}
    for key, value in data.items():
        if key in IMAGE_FIELDS and (value is None or isinstance(value, str)):
            result[key] = resolve_image_url(value, cdn_url)
        elif key in IMAGE_ARRAY_FIELDS and isinstance(value, list):
            result[key] = [_transform_image_object(item, cdn_url) for item in value]
        elif isinstance(value, (dict, list)):
            result[key] = transform_image_urls_deep(value, cdn_url)
        else:
            result[key] = value
    return result


def _transform_image_object(item: Any, cdn_url: str) -> Any:
    transformed = transform_image_urls_deep(item, cdn_url)
    if isinstance(transformed, dict) and isinstance(transformed.get("url"), str):
        transformed["url"] = resolve_image_url(transformed["url"], cdn_url)
    return transformed
