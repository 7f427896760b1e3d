import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional, Protocol

from src.shared.cosmos_client import CosmosDBClient
from src.shared.logging_utils import info as log_info
from src.shared.settings import StoreSettings
from src.specs.common.datetime_utils import utc_now
from src.specs.common.errors import ConfigurationError
from src.specs.documents.post_document_spec import PostDocument

# Fields a caller may never overwrite after insertion
_IMMUTABLE_FIELDS = ("id", "created")


def _new_post(record: Dict[str, Any]) -> PostDocument:
    body = {k: v for k, v in dict(record).items() if k not in _IMMUTABLE_FIELDS}
    return PostDocument(id=uuid.uuid4().hex, created=utc_now(), **body)


def _updatable(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in fields.items() if k not in _IMMUTABLE_FIELDS}


class PostStore(Protocol):
    """Persistence of Post records keyed by a store-assigned id."""

    def insert_many(self, records: Iterable[Dict[str, Any]]) -> List[PostDocument]:
        ...

    def find_all(self) -> List[PostDocument]:
        ...

    def find_by_id(self, post_id: str) -> Optional[PostDocument]:
        ...

    def update_by_id(self, post_id: str, fields: Dict[str, Any]) -> bool:
        ...

    def delete_by_id(self, post_id: str) -> bool:
        ...

    def count(self) -> int:
        ...

    def delete_all(self) -> int:
        ...


class InMemoryPostStore:
    def __init__(self) -> None:
        self._posts: Dict[str, PostDocument] = {}
        self._lock = threading.Lock()

    def insert_many(self, records: Iterable[Dict[str, Any]]) -> List[PostDocument]:
        posts = [_new_post(record) for record in records]
        with self._lock:
            for post in posts:
                self._posts[post.id] = post
        return [post.model_copy(deep=True) for post in posts]

    def find_all(self) -> List[PostDocument]:
        with self._lock:
            return [post.model_copy(deep=True) for post in self._posts.values()]

    def find_by_id(self, post_id: str) -> Optional[PostDocument]:
        with self._lock:
            post = self._posts.get(post_id)
            return post.model_copy(deep=True) if post else None

    def update_by_id(self, post_id: str, fields: Dict[str, Any]) -> bool:
        with self._lock:
            current = self._posts.get(post_id)
            if current is None:
                return False
            merged = current.model_dump()
            merged.update(_updatable(fields))
            self._posts[post_id] = PostDocument.model_validate(merged)
            return True

    def delete_by_id(self, post_id: str) -> bool:
        with self._lock:
            return self._posts.pop(post_id, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._posts)

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._posts)
            self._posts.clear()
            return removed


class CosmosPostStore:
    def __init__(self, client: CosmosDBClient, container_name: str = "posts") -> None:
        self.client = client
        self.container_name = container_name

    def insert_many(self, records: Iterable[Dict[str, Any]]) -> List[PostDocument]:
        created: List[PostDocument] = []
        for record in records:
            post = _new_post(record)
            stored = self.client.create_item(self.container_name, post.to_item())
            created.append(PostDocument.model_validate(stored))
        log_info(None, "cosmos:posts:insert_many", count=len(created))
        return created

    def find_all(self) -> List[PostDocument]:
        items = self.client.query_items(self.container_name, "SELECT * FROM c")
        return [PostDocument.model_validate(item) for item in items]

    def find_by_id(self, post_id: str) -> Optional[PostDocument]:
        item = self.client.get_item(self.container_name, post_id)
        return PostDocument.model_validate(item) if item else None

    def update_by_id(self, post_id: str, fields: Dict[str, Any]) -> bool:
        return self.client.patch_item(self.container_name, post_id, _updatable(fields))

    def delete_by_id(self, post_id: str) -> bool:
        return self.client.delete_item(self.container_name, post_id)

    def count(self) -> int:
        result = self.client.query_items(self.container_name, "SELECT VALUE COUNT(1) FROM c")
        return int(result[0]) if result else 0

    def delete_all(self) -> int:
        ids = self.client.query_items(self.container_name, "SELECT VALUE c.id FROM c")
        return self.client.bulk_delete_items(self.container_name, ids)


def _cosmos_store(settings: StoreSettings) -> CosmosPostStore:
    client = CosmosDBClient(settings)
    if settings.create_container:
        client.ensure_container(settings.container_name)
    log_info(None, "cosmos:posts:init", container=settings.container_name)
    return CosmosPostStore(client, settings.container_name)


def create_post_store(settings: Optional[StoreSettings] = None) -> PostStore:
    settings = settings or StoreSettings.from_env()
    backend = settings.backend
    if backend == "memory":
        return InMemoryPostStore()
    if backend == "cosmos":
        return _cosmos_store(settings)
    if backend != "auto":
        raise ConfigurationError(f"Unknown post store backend '{backend}'")
    # auto-detect cosmos if config present
    if settings.cosmos_configured:
        return _cosmos_store(settings)
    return InMemoryPostStore()


_store: Optional[PostStore] = None
_store_lock = threading.Lock()


def get_post_store() -> PostStore:
    """Process-wide store, created on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = create_post_store()
        return _store


def reset_post_store() -> None:
    global _store
    with _store_lock:
        _store = None
