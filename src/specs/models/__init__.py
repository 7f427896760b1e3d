from __future__ import annotations

from typing import Dict, Type

from pydantic import BaseModel

from src.specs.documents.post_document_spec import PostDocument
from src.specs.http.posts import (
    CreatePostRequest,
    UpdatePostRequest,
    PostResponse,
    ErrorResponse,
)


# Registry mapping output schema filenames to models for generation
SCHEMA_MODELS: Dict[str, Type[BaseModel]] = {
    "post.document.schema.json": PostDocument,
    "post.create.request.schema.json": CreatePostRequest,
    "post.update.request.schema.json": UpdatePostRequest,
    "post.response.schema.json": PostResponse,
    "error.response.schema.json": ErrorResponse,
}

__all__ = [
    "PostDocument",
    "CreatePostRequest",
    "UpdatePostRequest",
    "PostResponse",
    "ErrorResponse",
    "SCHEMA_MODELS",
]
