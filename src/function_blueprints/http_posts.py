import azure.functions as func
from src.http.posts_handler import PostsHandler
from src.shared.post_store import get_post_store


bp = func.Blueprint()


def _handler() -> PostsHandler:
    return PostsHandler(store_factory=get_post_store)


@bp.function_name(name="list_posts")
@bp.route(route="posts", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def list_posts(req: func.HttpRequest) -> func.HttpResponse:
    return _handler().list_posts(req)


@bp.function_name(name="create_post")
@bp.route(route="posts", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def create_post(req: func.HttpRequest) -> func.HttpResponse:
    return _handler().create_post(req)


@bp.function_name(name="get_post")
@bp.route(route="posts/{id}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_post(req: func.HttpRequest) -> func.HttpResponse:
    return _handler().get_post(req)


@bp.function_name(name="update_post")
@bp.route(route="posts/{id}", methods=["PUT"], auth_level=func.AuthLevel.ANONYMOUS)
def update_post(req: func.HttpRequest) -> func.HttpResponse:
    return _handler().update_post(req)


@bp.function_name(name="delete_post")
@bp.route(route="posts/{id}", methods=["DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
def delete_post(req: func.HttpRequest) -> func.HttpResponse:
    return _handler().delete_post(req)
