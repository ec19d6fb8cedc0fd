"""Minimal deterministic OpenAPI spec builder.

Scope: auth endpoints and the transaction collection/actions. Required
permissions are read off the view functions' ``require_permissions`` gate
so the document cannot drift from the routes.
"""
from typing import Any, Dict, Optional
from flask import current_app
from approvals.services.transactions import TX_FSM
from approvals.utils.validation import MAX_PRICE_PENCE

__all__ = ["build_openapi_spec", "REDOC_PAGE"]

REDOC_PAGE = (
    "<!DOCTYPE html><html><head><title>API Docs</title>"
    "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
    "</head><body><redoc spec-url='/openapi.json'></redoc>"
    "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
    "</body></html>"
)


def _ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _json(schema: Dict[str, Any], description: str = "OK") -> Dict[str, Any]:
    return {"description": description, "content": {"application/json": {"schema": schema}}}


def _error(description: str) -> Dict[str, Any]:
    return _json(_ref("Error"), description)


def _schemas() -> Dict[str, Any]:
    user_ref = {
        "type": "object",
        "nullable": True,
        "properties": {"id": {"type": "integer"}, "email": {"type": "string"}},
    }
    return {
        "Credentials": {
            "type": "object",
            "properties": {"email": {"type": "string", "format": "email"}, "password": {"type": "string"}},
            "required": ["email", "password"],
        },
        "User": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "email": {"type": "string"},
                "permissions": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["id", "email", "permissions"],
        },
        "AuthResponse": {
            "type": "object",
            "properties": {"access_token": {"type": "string"}, "user": _ref("User")},
            "required": ["access_token", "user"],
        },
        "TransactionInput": {
            "type": "object",
            "properties": {
                "title": {"type": "string", "minLength": 1, "maxLength": 255},
                "priceGBP": {"type": "number", "exclusiveMinimum": True, "minimum": 0,
                             "maximum": MAX_PRICE_PENCE / 100, "multipleOf": 0.01},
            },
            "required": ["title", "priceGBP"],
        },
        "Transaction": {
            "type": "object",
            "properties": {
                "id": {"type": "integer"},
                "title": {"type": "string"},
                "priceGBP": {"type": "number"},
                "status": {"type": "string", "enum": TX_FSM.states()},
                "createdById": {"type": "integer"},
                "createdBy": user_ref,
                "createdAt": {"type": "string", "format": "date-time"},
                "approvedById": {"type": "integer", "nullable": True},
                "approvedBy": user_ref,
                "approvedAt": {"type": "string", "format": "date-time", "nullable": True},
            },
            "x-transitions": TX_FSM.transitions(),
        },
        "Error": {
            "type": "object",
            "properties": {
                "error": {
                    "type": "object",
                    "properties": {
                        "status": {"type": "integer"},
                        "title": {"type": "string"},
                        "detail": {"type": "string"},
                    },
                }
            },
            "required": ["error"],
        },
    }


def _required_permissions(endpoint: str) -> Optional[list]:
    view = current_app.view_functions.get(endpoint)
    codes = getattr(view, "required_permissions", None)
    return list(codes) if codes else None


def build_openapi_spec() -> Dict[str, Any]:
    prefix = current_app.config.get("API_PREFIX", "")
    open_op = {"security": []}
    paths: Dict[str, Any] = {
        "/auth/login": {"post": {
            "summary": "Login",
            "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("Credentials")}}},
            "responses": {"200": _json(_ref("AuthResponse"), "Token issued"), "400": _error("Validation failed"),
                          "401": _error("Unknown email or wrong password")},
            **open_op,
        }},
        "/auth/register": {"post": {
            "summary": "Register",
            "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("Credentials")}}},
            "responses": {"201": _json(_ref("AuthResponse"), "Account created"), "400": _error("Validation failed"),
                          "409": _error("Email already registered")},
            **open_op,
        }},
        "/auth/me": {"get": {
            "summary": "Current user",
            "responses": {"200": _json(_ref("User")), "401": _error("Missing or invalid token"), "404": _error("User gone")},
        }},
        "/transactions": {
            "get": {
                "summary": "List transactions, newest first",
                "responses": {"200": _json({"type": "array", "items": _ref("Transaction")}),
                              "401": _error("Missing or invalid token"), "403": _error("Missing permission")},
                "x-endpoint": "transactions.list_transactions",
            },
            "post": {
                "summary": "Create a pending transaction",
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("TransactionInput")}}},
                "responses": {"201": _json(_ref("Transaction"), "Created"), "400": _error("Validation failed"),
                              "401": _error("Missing or invalid token"), "403": _error("Missing permission")},
                "x-endpoint": "transactions.create_transaction",
            },
        },
        "/transactions/{tx_id}/approve": {"post": {
            "summary": "Approve a pending transaction",
            "parameters": [{"name": "tx_id", "in": "path", "required": True, "schema": {"type": "integer"}}],
            "responses": {"200": _json(_ref("Transaction")), "400": _error("Already approved"),
                          "401": _error("Missing or invalid token"), "403": _error("Missing permission"),
                          "404": _error("Transaction not found")},
            "x-endpoint": "transactions.approve_transaction",
        }},
    }

    for ops in paths.values():
        for od in ops.values():
            endpoint = od.pop("x-endpoint", None)
            perms = _required_permissions(endpoint) if endpoint else None
            if perms:
                od["x-required-permissions"] = perms

    # Add operationIds & tags
    tag_desc: Dict[str, str] = {}
    prefixed: Dict[str, Any] = {}
    for path, ops in paths.items():
        tag = path.split("/")[1].capitalize()
        for method, od in ops.items():
            rid = path.strip("/").replace("/", "_").replace("{", "").replace("}", "")
            od["operationId"] = f"{method}_{rid}"
            od["tags"] = [tag]
        tag_desc[tag] = f"{tag} endpoints"
        prefixed[f"{prefix}{path}"] = ops

    return {
        "openapi": "3.0.3",
        "info": {"title": "Transaction Approvals API", "version": "0.1.0"},
        "paths": prefixed,
        "components": {
            "schemas": _schemas(),
            "securitySchemes": {"BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        },
        "security": [{"BearerAuth": []}],
        "tags": [{"name": n, "description": d} for n, d in sorted(tag_desc.items())],
    }
