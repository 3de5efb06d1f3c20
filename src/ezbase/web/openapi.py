from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

PUBLIC_ENDPOINTS = {
    ("POST", "/signup_email"),
    ("POST", "/login_email"),
    ("GET", "/logout"),
    ("GET", "/get_logs"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="EzBase API",
            version="0.1.0",
            summary="Schemaless document store gateway with cookie sessions",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "session",
                "description": "Session token issued by /login_email, extended on every request",
            },
        }

        # Apply security globally, then clear it for public endpoints
        openapi_schema["security"] = [{"SessionCookie": []}]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Document '65019caf8526205200000000' not found", "type": "not_found"},
                {"message": "Invalid collection name 'a b'", "type": "validation_error"},
                {"message": "The document store failed.", "type": "store_error"},
            ]
        }
    }
