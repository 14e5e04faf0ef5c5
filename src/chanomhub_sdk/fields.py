"""
Article field selection.

Maps a preset or an explicit field list to a GraphQL selection set body.
Shared by the article and search repositories.
"""
from typing import Dict, List, Optional, Sequence

from .types import ArticleField, ArticlePreset

DEFAULT_PRESET: ArticlePreset = "standard"

FIELD_PRESETS: Dict[str, List[str]] = {
    "minimal": ["id", "title", "slug", "mainImage"],
    "standard": [
        "id",
        "title",
        "slug",
        "description",
        "ver",
        "mainImage",
        "coverImage",
        "author",
        "tags",
        "platforms",
        "categories",
        "creators",
        "engine",
        "favoritesCount",
        "favorited",
        "createdAt",
        "updatedAt",
        "status",
        "sequentialCode",
        "images",
    ],
    "full": [
        "id",
        "title",
        "slug",
        "description",
        "body",
        "ver",
        "mainImage",
        "coverImage",
        "backgroundImage",
        "author",
        "tags",
        "platforms",
        "categories",
        "creators",
        "engine",
        "images",
        "favoritesCount",
        "favorited",
        "createdAt",
        "updatedAt",
        "status",
        "sequentialCode",
    ],
}

# Field identifier -> GraphQL fragment
FIELD_MAPPINGS: Dict[str, str] = {
    "id": "id",
    "title": "title",
    "slug": "slug",
    "description": "description",
    "body": "body",
    "ver": "ver",
    "mainImage": "mainImage",
    "coverImage": "coverImage",
    "backgroundImage": "backgroundImage",
    "createdAt": "createdAt",
    "updatedAt": "updatedAt",
    "status": "status",
    "sequentialCode": "sequentialCode",
    "favoritesCount": "favoritesCount",
    "favorited": "favorited",
    "engine": """engine {
  id
  name
}""",
    "author": """author {
  id
  name
  image
}""",
    "creators": """creators {
  id
  name
}""",
    "tags": """tags {
  id
  name
}""",
    "platforms": """platforms {
  id
  name
}""",
    "categories": """categories {
  id
  name
}""",
    "images": """images {
  id
  url
}""",
    "mods": """mods {
  id
  name
  description
  creditTo
  downloadLink
  version
  status
  categories {
    id
    name
  }
  images {
    id
    url
  }
}""",
}


def build_fields_query(
    preset: Optional[ArticlePreset] = None,
    fields: Optional[Sequence[ArticleField]] = None,
) -> str:
    """
    Build the selection set body for an article query.

    `fields` replaces the preset entirely when given; the preset defaults
    to "standard". Fragments keep the requested order and unknown
    identifiers are dropped.
    """
    if fields is not None:
        selected: Sequence[str] = fields
    else:
        selected = FIELD_PRESETS.get(preset or DEFAULT_PRESET, FIELD_PRESETS[DEFAULT_PRESET])

    return "\n".join(FIELD_MAPPINGS[f] for f in selected if f in FIELD_MAPPINGS)
