"""Key-value preference storage injected into the tools layer."""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from skillshelf.errors import InvalidConfigSchemaError, InvalidJsonFormatError
from skillshelf.utils import read_json_safe, write_json

TOOL_TOGGLES_KEY = "tool_toggles"
CUSTOM_TOOLS_KEY = "custom_tools"
TOOL_ORDER_KEY = "tool_order"
GITHUB_TOKEN_KEY = "github_token"

PREFERENCES_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        TOOL_TOGGLES_KEY: {
            "type": "object",
            "additionalProperties": {"type": "boolean"},
        },
        CUSTOM_TOOLS_KEY: {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "skills_path"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "name": {"type": "string", "minLength": 1},
                    "config_path": {"type": "string"},
                    "skills_path": {"type": "string", "minLength": 1},
                    "cli": {"type": "boolean"},
                },
            },
        },
        TOOL_ORDER_KEY: {"type": "array", "items": {"type": "string"}},
        GITHUB_TOKEN_KEY: {"type": "string"},
    },
}


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


class IPreferenceStore(ABC):
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryPreferenceStore(IPreferenceStore):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonPreferenceStore(IPreferenceStore):
    """Preferences persisted as one JSON object, validated on every load and save."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._validator = Draft202012Validator(PREFERENCES_SCHEMA)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            payload = self._load()
            payload[key] = value
            self._validate(payload)
            write_json(self._path, payload)

    def delete(self, key: str) -> None:
        with self._lock:
            payload = self._load()
            if key not in payload:
                return
            del payload[key]
            write_json(self._path, payload)

    def _load(self) -> dict[str, Any]:
        payload, error = read_json_safe(self._path)
        if error is not None:
            raise InvalidJsonFormatError(self._path, error)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise InvalidConfigSchemaError(self._path, "expected a JSON object")
        self._validate(payload)
        return payload

    def _validate(self, payload: dict[str, Any]) -> None:
        error = next(iter(self._validator.iter_errors(payload)), None)
        if error is not None:
            raise InvalidConfigSchemaError(self._path, format_schema_error(error))
