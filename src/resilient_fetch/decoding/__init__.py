"""
Response decoders.

Turn raw response bytes into the caller's target shape:
- JSONDecoder: plain JSON values
- ModelDecoder: any pydantic-validatable type (models, dataclasses, generics)
"""

from .decoders import Decoder, JSONDecoder, ModelDecoder
from .exceptions import DecodeError

__all__ = [
    "Decoder",
    "DecodeError",
    "JSONDecoder",
    "ModelDecoder",
]
