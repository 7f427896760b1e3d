import json
from typing import Any, Dict, List, Optional

import azure.functions as func
import pytest

from src.http.posts_handler import PostsHandler
from src.shared.post_store import InMemoryPostStore

FIRST_NAMES = ["Ada", "Grace", "Linus", "Margaret", "Dennis", "Barbara", "Ken", "Frances", "Alan", "Radia"]
LAST_NAMES = ["Lovelace", "Hopper", "Torvalds", "Hamilton", "Ritchie", "Liskov", "Thompson", "Allen", "Turing", "Perlman"]


def seed_records(count: int = 10) -> List[Dict[str, Any]]:
    records = []
    for i in range(count):
        records.append(
            {
                "author": {
                    "firstName": FIRST_NAMES[i % len(FIRST_NAMES)],
                    "lastName": LAST_NAMES[i % len(LAST_NAMES)],
                },
                "title": f"Post number {i + 1}",
                "content": f"Body of post {i + 1}. " * 5,
            }
        )
    return records


def make_request(
    method: str,
    url: str = "/posts",
    body: Any = None,
    route_params: Optional[Dict[str, str]] = None,
    raw_body: Optional[bytes] = None,
) -> func.HttpRequest:
    if raw_body is None:
        raw_body = json.dumps(body).encode("utf-8") if body is not None else b""
    return func.HttpRequest(
        method=method,
        url=url,
        headers={"content-type": "application/json"},
        params={},
        route_params=route_params or {},
        body=raw_body,
    )


def response_json(resp: func.HttpResponse) -> Any:
    return json.loads(resp.get_body().decode("utf-8"))


@pytest.fixture
def store():
    store = InMemoryPostStore()
    yield store
    store.delete_all()


@pytest.fixture
def seeded(store):
    return store.insert_many(seed_records())


@pytest.fixture
def handler(store):
    return PostsHandler(store)
