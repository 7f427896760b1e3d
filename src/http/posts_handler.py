"""
HTTP translation layer for the /posts resource.

Each method takes an ``azure.functions.HttpRequest`` and returns an
``azure.functions.HttpResponse``. Request bodies are validated against the
schemas in ``src.specs.http.posts`` before the store is touched; store
failures become a generic 500.
"""
import json
import uuid
from typing import Any, Callable, Dict, Optional

import azure.functions as func
from pydantic import BaseModel, ValidationError as SchemaValidationError

from src.shared.logging_utils import info as log_info, warning as log_warning, error as log_error
from src.shared.post_store import PostStore
from src.specs.common.errors import BlogPostsError, NotFoundError, ValidationError
from src.specs.http.posts import (
    CreatePostRequest,
    ErrorResponse,
    PostResponse,
    UpdatePostRequest,
)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _json_response(model: Any, status_code: int) -> func.HttpResponse:
    if isinstance(model, BaseModel):
        body = model.model_dump_json()
    else:
        body = json.dumps(model)
    return func.HttpResponse(body=body, mimetype="application/json", status_code=status_code)


def _error_response(exc: BlogPostsError) -> func.HttpResponse:
    error = exc.to_dict()
    err = ErrorResponse(message=error["message"], errorCode=error["code"], details=error["details"] or None)
    return _json_response(err, exc.status_code)


def _internal_error() -> func.HttpResponse:
    return _json_response(ErrorResponse(message=INTERNAL_ERROR_MESSAGE), 500)


def _schema_error(exc: SchemaValidationError) -> ValidationError:
    """Name the first offending field the way clients expect to read it."""
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    if first.get("type") == "missing":
        return ValidationError(f"Missing `{field}` in request body", field=field)
    return ValidationError(f"Invalid `{field}` in request body: {first.get('msg')}", field=field)


def _read_json(req: func.HttpRequest) -> Dict[str, Any]:
    try:
        data = req.get_json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _request_id(req: func.HttpRequest) -> str:
    return req.headers.get("x-request-id") or uuid.uuid4().hex


class PostsHandler:
    """Serves /posts against a store, given directly or built on first use by `store_factory`."""

    def __init__(self, store: Optional[PostStore] = None, store_factory: Optional[Callable[[], PostStore]] = None):
        if store is None and store_factory is None:
            raise ValueError("PostsHandler needs a store or a store_factory")
        self._store = store
        self._store_factory = store_factory

    @property
    def store(self) -> PostStore:
        if self._store is None:
            self._store = self._store_factory()
        return self._store

    def _run(self, req: func.HttpRequest, action: str, operation) -> func.HttpResponse:
        request_id = _request_id(req)
        try:
            return operation(request_id)
        except (ValidationError, NotFoundError) as exc:
            log_warning(request_id, f"posts:{action}_rejected", code=exc.code, error=str(exc))
            return _error_response(exc)
        except Exception as exc:
            log_error(request_id, "posts:storage_error", action=action, error=str(exc))
            return _internal_error()

    def list_posts(self, req: func.HttpRequest) -> func.HttpResponse:
        def operation(request_id: str) -> func.HttpResponse:
            posts = self.store.find_all()
            log_info(request_id, "posts:listed", count=len(posts))
            body = [PostResponse.from_document(p).model_dump() for p in posts]
            return _json_response(body, 200)

        return self._run(req, "list", operation)

    def get_post(self, req: func.HttpRequest) -> func.HttpResponse:
        post_id = req.route_params.get("id")

        def operation(request_id: str) -> func.HttpResponse:
            post = self.store.find_by_id(post_id)
            if post is None:
                raise NotFoundError("Post", post_id)
            return _json_response(PostResponse.from_document(post), 200)

        return self._run(req, "get", operation)

    def create_post(self, req: func.HttpRequest) -> func.HttpResponse:
        def operation(request_id: str) -> func.HttpResponse:
            data = _read_json(req)
            try:
                parsed = CreatePostRequest.model_validate(data)
            except SchemaValidationError as exc:
                raise _schema_error(exc)
            post = self.store.insert_many([parsed.model_dump()])[0]
            log_info(request_id, "posts:created", postId=post.id)
            return _json_response(PostResponse.from_document(post), 201)

        return self._run(req, "create", operation)

    def update_post(self, req: func.HttpRequest) -> func.HttpResponse:
        post_id = req.route_params.get("id")

        def operation(request_id: str) -> func.HttpResponse:
            data = _read_json(req)
            body_id = data.get("id")
            if not body_id or body_id != post_id:
                raise ValidationError(
                    f"Request path id ({post_id}) and request body id ({body_id}) must match",
                    field="id",
                )
            try:
                parsed = UpdatePostRequest.model_validate(data)
            except SchemaValidationError as exc:
                raise _schema_error(exc)
            changes = parsed.changes()
            if not self.store.update_by_id(post_id, changes):
                log_info(request_id, "posts:update_not_found", postId=post_id)
                raise NotFoundError("Post", post_id)
            log_info(request_id, "posts:updated", postId=post_id, fields=sorted(changes))
            return func.HttpResponse(status_code=204)

        return self._run(req, "update", operation)

    def delete_post(self, req: func.HttpRequest) -> func.HttpResponse:
        post_id = req.route_params.get("id")

        def operation(request_id: str) -> func.HttpResponse:
            deleted = self.store.delete_by_id(post_id)
            # deleting an unknown id is still a success
            log_info(request_id, "posts:deleted", postId=post_id, existed=deleted)
            return func.HttpResponse(status_code=204)

        return self._run(req, "delete", operation)
