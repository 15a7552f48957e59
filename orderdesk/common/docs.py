"""OpenAPI document served at `/openapi.json` and rendered at `/api-docs`."""

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi


BEARER_SCHEME = {
    "type": "http",
    "scheme": "bearer",
    "bearerFormat": "JWT",
    "description": "Declared for client tooling only. No endpoint checks this token.",
}


def install_openapi(app: FastAPI, server_url: str) -> None:
    """Replace the default schema builder with one that adds servers and bearerAuth."""

    def build_schema() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
            servers=[{"url": server_url}],
        )
        schema.setdefault("components", {})["securitySchemes"] = {"bearerAuth": BEARER_SCHEME}
        app.openapi_schema = schema
        return schema

    app.openapi = build_schema
