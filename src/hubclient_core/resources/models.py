"""Base class for JSON-backed dataclass models."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, TypeVar
from urllib.parse import quote

M = TypeVar("M", bound="Model")


def json_field(name: str | None = None, *, model: type["Model"] | None = None, many: bool = False, **kwargs) -> Any:
    """Declare a dataclass field with its JSON key and nested model.

    Args:
        name: JSON key when it differs from the attribute name.
        model: Nested ``Model`` type for object (or list of objects) values.
        many: The value is a list of ``model`` objects.
    """
    return field(metadata={"json": name, "model": model, "many": many}, **kwargs)


@dataclass
class Model:
    """Dataclass model that converts to and from API JSON.

    Keys the model does not declare are ignored, and null or missing values
    keep the field default.
    """

    @classmethod
    def from_dict(cls: type[M], data: Any) -> M:
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a JSON object for {cls.__name__}, got {type(data).__name__}")

        kwargs = {}
        for f in fields(cls):
            key = f.metadata.get("json") or f.name
            value = data.get(key)
            if value is None:
                continue
            model = f.metadata.get("model")
            if model is not None:
                if f.metadata.get("many"):
                    value = [model.from_dict(v) for v in value]
                else:
                    value = model.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for f in fields(self):
            key = f.metadata.get("json") or f.name
            value = getattr(self, f.name)
            if isinstance(value, Model):
                value = value.to_dict()
            elif isinstance(value, list):
                value = [v.to_dict() if isinstance(v, Model) else v for v in value]
            result[key] = value
        return result


def require(value: str, name: str) -> str:
    """Reject an empty identifier before any request is made."""
    if not value:
        raise ValueError(f"{name} is required")
    return value


def segment(value: str, name: str) -> str:
    """Require ``value`` and escape it as a single URL path segment."""
    return quote(require(value, name), safe="")


def repository_path(repo_id: str) -> str:
    """Escape a ``namespace/name`` repository id as two path segments."""
    namespace, _, name = require(repo_id, "repository id").partition("/")
    if not namespace or not name:
        raise ValueError(f"repository id must be namespace/name, got {repo_id!r}")
    return f"{segment(namespace, 'namespace')}/{segment(name, 'repository name')}"
