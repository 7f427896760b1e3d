#!/usr/bin/env python3
"""
Generate JSON Schemas, YAML variants, and OpenAPI from Pydantic models.

Outputs under src/specs/:
 - schemas/*.json (and *.yaml)
 - openapi.yaml and openapi.json
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import yaml


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
SPECS = SRC / "specs"
SCHEMAS_DIR = SPECS / "schemas"

sys.path.insert(0, str(ROOT))

from src.specs.models import (  # noqa: E402
    SCHEMA_MODELS,
    CreatePostRequest,
    UpdatePostRequest,
    PostResponse,
    ErrorResponse,
)


def write_json_yaml(obj: dict, json_path: Path) -> None:
    json_path.parent.mkdir(parents=True, exist_ok=True)
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
    yaml_path = json_path.with_suffix(".yaml")
    with yaml_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def generate_model_schemas() -> None:
    for filename, model in SCHEMA_MODELS.items():
        schema = model.model_json_schema()
        write_json_yaml(schema, SCHEMAS_DIR / filename)


def _json_content(ref: str) -> dict:
    return {"application/json": {"schema": {"$ref": f"#/components/schemas/{ref}"}}}


def _error(description: str) -> dict:
    return {"description": description, "content": _json_content("ErrorResponse")}


def build_openapi() -> dict:
    components = {
        "schemas": {
            "CreatePostRequest": CreatePostRequest.model_json_schema(),
            "UpdatePostRequest": UpdatePostRequest.model_json_schema(),
            "PostResponse": PostResponse.model_json_schema(),
            "ErrorResponse": ErrorResponse.model_json_schema(),
        }
    }
    id_param = {"in": "path", "name": "id", "schema": {"type": "string"}, "required": True}

    spec = {
        "openapi": "3.0.3",
        "info": {
            "title": "Blog Posts API",
            "version": "0.1.0",
            "description": "CRUD endpoints for blog posts exposed by the Functions app.",
        },
        "servers": [
            {"url": "http://localhost:7071", "description": "Local Functions host"}
        ],
        "paths": {
            "/posts": {
                "get": {
                    "summary": "List all posts",
                    "operationId": "listPosts",
                    "responses": {
                        "200": {
                            "description": "All posts",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/PostResponse"},
                                    }
                                }
                            },
                        },
                        "500": _error("Store failure"),
                    },
                },
                "post": {
                    "summary": "Create a post",
                    "operationId": "createPost",
                    "requestBody": {"required": True, "content": _json_content("CreatePostRequest")},
                    "responses": {
                        "201": {"description": "Post created", "content": _json_content("PostResponse")},
                        "400": _error("Missing or invalid field"),
                        "500": _error("Store failure"),
                    },
                },
            },
            "/posts/{id}": {
                "get": {
                    "summary": "Read one post",
                    "operationId": "getPost",
                    "parameters": [id_param],
                    "responses": {
                        "200": {"description": "The post", "content": _json_content("PostResponse")},
                        "404": _error("No post with this id"),
                        "500": _error("Store failure"),
                    },
                },
                "put": {
                    "summary": "Update the fields sent in the body",
                    "operationId": "updatePost",
                    "parameters": [id_param],
                    "requestBody": {"required": True, "content": _json_content("UpdatePostRequest")},
                    "responses": {
                        "204": {"description": "Post updated"},
                        "400": _error("Body id does not match path id, or invalid field"),
                        "404": _error("No post with this id"),
                        "500": _error("Store failure"),
                    },
                },
                "delete": {
                    "summary": "Delete a post (idempotent)",
                    "operationId": "deletePost",
                    "parameters": [id_param],
                    "responses": {
                        "204": {"description": "Post deleted or already absent"},
                        "500": _error("Store failure"),
                    },
                },
            },
        },
        "components": components,
    }
    return spec


def generate_openapi() -> None:
    spec = build_openapi()
    write_json_yaml(spec, SPECS / "openapi.json")


def main() -> None:
    generate_model_schemas()
    generate_openapi()
    print("Specs generated under src/specs/")


if __name__ == "__main__":
    main()
