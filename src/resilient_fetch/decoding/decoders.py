"""
Response body decoders.

A decoder turns raw body bytes into the caller's target shape. Decoders are
pure and deterministic: the same bytes always produce the same value or the
same DecodeError.
"""

import json
from typing import Any, Generic, Protocol, TypeVar

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DecodeError

logger = structlog.get_logger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Decoder(Protocol[T_co]):
    """
    Protocol for response decoders.

    Implementations raise DecodeError on malformed or type-mismatched input
    and must not have side effects.
    """

    def decode(self, body: bytes) -> T_co:
        ...


def _require_content(body: bytes) -> None:
    if not body or not body.strip():
        raise DecodeError("Response body is empty or whitespace-only", raw_content=body)


class JSONDecoder:
    """
    Decode a body as JSON into plain Python values.

    Raises DecodeError on empty bodies, invalid UTF-8 and invalid JSON.
    """

    def decode(self, body: bytes) -> Any:
        _require_content(body)

        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(
                f"Failed to parse response as JSON: {e.msg}",
                raw_content=body,
                errors=[f"{e.msg} at line {e.lineno} col {e.colno}"],
            ) from e
        except UnicodeDecodeError as e:
            raise DecodeError(
                "Response body is not valid UTF-8",
                raw_content=body,
                errors=[str(e)],
            ) from e

        logger.debug("Decoded JSON body", value_type=type(parsed).__name__)
        return parsed

    def __repr__(self) -> str:
        return "JSONDecoder()"


class ModelDecoder(Generic[T]):
    """
    Decode a JSON body straight into a typed shape.

    ``shape`` is anything pydantic can build a TypeAdapter for: BaseModel
    subclasses, dataclasses, TypedDicts, or generics such as
    ``dict[str, int]`` and ``list[Item]``.
    """

    def __init__(self, shape: Any, strict: bool = False):
        """
        Args:
            shape: Target type
            strict: Disable pydantic's lax coercion (e.g. "7" -> 7)
        """
        self.shape = shape
        self.strict = strict
        self._adapter: TypeAdapter = TypeAdapter(shape)

    def decode(self, body: bytes) -> T:
        _require_content(body)

        try:
            return self._adapter.validate_json(body, strict=self.strict)
        except PydanticValidationError as e:
            errors = []
            for error in e.errors()[:10]:
                path = ".".join(str(p) for p in error["loc"]) if error["loc"] else "root"
                errors.append(f"{path}: {error['msg']}")
            raise DecodeError(
                f"Response does not match {self._shape_name()} ({e.error_count()} error(s))",
                raw_content=body,
                errors=errors,
            ) from e

    def _shape_name(self) -> str:
        return getattr(self.shape, "__name__", None) or repr(self.shape)

    def __repr__(self) -> str:
        return f"ModelDecoder({self._shape_name()})"
