"""OpenAPI metadata and customization utilities.

Provides a helper to enrich the generated OpenAPI schema with:
- Tags metadata
- Admin key security scheme (``X-Admin-Key``) on catalog write operations

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_ADMIN_METHODS = {"post", "put", "delete"}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and admin security.

    - Injects components.securitySchemes for admin auth (header ``X-Admin-Key``)
    - Marks fabric write operations as requiring it; everything else stays public
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminKeyAuth",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-Admin-Key",
                "description": "Admin key required to create, edit or delete fabrics.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {"name": "Fabrics", "description": "Fabric catalog browsing and administration."},
            {"name": "Generation", "description": "Sofa photo upload and AI visualization."},
            {"name": "Gallery", "description": "Per-user saved results."},
            {"name": "Quota", "description": "Daily generation allowance."},
            {"name": "Health", "description": "Liveness and readiness checks."},
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if not path.startswith("/api/fabrics"):
                continue
            for method, method_obj in methods.items():
                if method in _ADMIN_METHODS and isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminKeyAuth": []}]

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
