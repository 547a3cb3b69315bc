"""Pytest configuration and fixtures for openapi-scorecard tests."""

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

SpecFactory = Callable[..., dict[str, Any]]

_ERROR_RESPONSE = {"$ref": "#/components/responses/Error"}

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {
        "title": "Pet Store",
        "description": "Manage the pets available in the store inventory.",
        "version": "1.0.0",
        "contact": {"name": "API Team", "email": "api@example.com"},
        "license": {"name": "MIT"},
    },
    "servers": [{"url": "https://api.example.com/v1", "description": "Production"}],
    "tags": [
        {
            "name": "pets",
            "description": "Operations on pets",
            "externalDocs": {"url": "https://docs.example.com/pets"},
        }
    ],
    "security": [{"bearerAuth": []}],
    "paths": {
        "/pets": {
            "description": "The collection of pets.",
            "get": {
                "operationId": "listPets",
                "summary": "List all pets",
                "tags": ["pets"],
                "parameters": [{"$ref": "#/components/parameters/Limit"}],
                "responses": {
                    "200": {
                        "description": "A page of pets.",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "description": "Pets in the store.",
                                    "items": {"$ref": "#/components/schemas/Pet"},
                                    "example": [{"id": 1, "name": "Rex"}],
                                },
                                "example": [{"id": 1, "name": "Rex"}],
                            }
                        },
                    },
                    "400": _ERROR_RESPONSE,
                    "401": _ERROR_RESPONSE,
                    "500": _ERROR_RESPONSE,
                    "default": _ERROR_RESPONSE,
                },
            },
            "post": {
                "operationId": "createPet",
                "summary": "Create a pet",
                "tags": ["pets"],
                "requestBody": {
                    "description": "The pet to add.",
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Pet"},
                            "example": {"id": 2, "name": "Tom"},
                        }
                    },
                },
                "responses": {
                    "201": {
                        "description": "The created pet.",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"},
                                "example": {"id": 2, "name": "Tom"},
                            }
                        },
                    },
                    "400": _ERROR_RESPONSE,
                    "401": _ERROR_RESPONSE,
                    "500": _ERROR_RESPONSE,
                    "default": _ERROR_RESPONSE,
                },
            },
        },
        "/pets/{petId}": {
            "description": "A single pet.",
            "parameters": [{"$ref": "#/components/parameters/PetId"}],
            "get": {
                "operationId": "getPet",
                "summary": "Fetch one pet",
                "tags": ["pets"],
                "responses": {
                    "200": {
                        "description": "The pet.",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"},
                                "example": {"id": 1, "name": "Rex"},
                            }
                        },
                    },
                    "401": _ERROR_RESPONSE,
                    "404": _ERROR_RESPONSE,
                    "500": _ERROR_RESPONSE,
                    "default": _ERROR_RESPONSE,
                },
            },
            "put": {
                "operationId": "replacePet",
                "summary": "Replace a pet",
                "tags": ["pets"],
                "requestBody": {
                    "description": "The new pet data.",
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Pet"},
                            "example": {"id": 1, "name": "Rexy"},
                        }
                    },
                },
                "responses": {
                    "200": {
                        "description": "The updated pet.",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"},
                                "example": {"id": 1, "name": "Rexy"},
                            }
                        },
                    },
                    "400": _ERROR_RESPONSE,
                    "401": _ERROR_RESPONSE,
                    "404": _ERROR_RESPONSE,
                    "500": _ERROR_RESPONSE,
                    "default": _ERROR_RESPONSE,
                },
            },
            "delete": {
                "operationId": "deletePet",
                "summary": "Delete a pet",
                "tags": ["pets"],
                "responses": {
                    "204": {"description": "The pet was deleted."},
                    "401": _ERROR_RESPONSE,
                    "404": _ERROR_RESPONSE,
                    "500": _ERROR_RESPONSE,
                    "default": _ERROR_RESPONSE,
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "description": "A pet in the store.",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "integer", "format": "int64", "description": "Pet identifier.", "example": 1},
                    "name": {"type": "string", "description": "Pet name.", "example": "Rex"},
                },
                "example": {"id": 1, "name": "Rex"},
            },
            "Error": {
                "type": "object",
                "description": "An error payload.",
                "required": ["message"],
                "properties": {
                    "message": {"type": "string", "description": "What went wrong.", "example": "Not found"},
                },
                "example": {"message": "Not found"},
            },
        },
        "parameters": {
            "PetId": {
                "name": "petId",
                "in": "path",
                "required": True,
                "description": "Identifier of the pet.",
                "schema": {"type": "integer", "format": "int64", "description": "Pet identifier.", "example": 1},
                "example": 1,
            },
            "Limit": {
                "name": "limit",
                "in": "query",
                "description": "Maximum number of pets to return.",
                "schema": {"type": "integer", "format": "int32", "description": "Page size.", "example": 10},
                "example": 10,
            },
        },
        "responses": {
            "Error": {
                "description": "Unexpected error.",
                "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}},
            }
        },
        "securitySchemes": {"bearerAuth": {"type": "http", "scheme": "bearer"}},
    },
}


@pytest.fixture
def minimal_spec() -> dict[str, Any]:
    """Smallest valid document: no paths, no components."""
    return {"openapi": "3.0.3", "info": {"title": "Empty", "version": "1.0.0"}, "paths": {}}


@pytest.fixture
def petstore_spec() -> dict[str, Any]:
    """Well-formed document that follows every checked practice."""
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def make_spec() -> SpecFactory:
    """Factory for small documents.

    Usage:
        def test_something(make_spec):
            spec = make_spec(paths={"/users": {"get": {...}}})
    """

    def _make(
        paths: dict[str, Any] | None = None,
        components: dict[str, Any] | None = None,
        **extra: Any,
    ) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "openapi": "3.0.3",
            "info": {"title": "Test API", "version": "1.0.0"},
            "paths": paths or {},
        }
        if components is not None:
            spec["components"] = components
        spec.update(extra)
        return spec

    return _make


@pytest.fixture
def petstore_yaml(tmp_path: Path, petstore_spec: dict[str, Any]) -> Path:
    """Pet store document written as YAML."""
    path = tmp_path / "petstore.yaml"
    path.write_text(yaml.safe_dump(petstore_spec, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def petstore_json(tmp_path: Path, petstore_spec: dict[str, Any]) -> Path:
    """Pet store document written as JSON."""
    path = tmp_path / "petstore.json"
    path.write_text(json.dumps(petstore_spec), encoding="utf-8")
    return path
