"""Base class shared by every message exchanged during a WebAuthn ceremony."""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping, MutableMapping, Set
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, Optional, Tuple, Type, TypeVar

from ..errors import MessageParseError
from ..render import stringify_obj
from ..utils import coerce_to_base64url, coerce_to_bytes
from ..validation import (
    MISSING,
    Shape,
    check_format,
    check_optional_format,
    check_optional_type,
    check_type,
    describe_value,
)

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound="Message")


def _copy_tree(value: Any) -> Any:
    """Copy nested containers, leaving leaf values shared."""

    if isinstance(value, Mapping):
        return {key: _copy_tree(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_copy_tree(item) for item in value]
    if isinstance(value, Set):
        return {_copy_tree(item) for item in value}
    return value


@dataclass(frozen=True)
class Field:
    """A property recognised by a message.

    ``fmt`` takes precedence over ``shape`` when both are given. ``check`` is
    called with the whole message after the type/format check and is
    responsible for handling an absent value. ``binary`` marks top level
    properties that travel as base64url and are held as ``bytes`` once decoded.
    """

    name: str
    shape: Optional[Shape] = None
    required: bool = False
    fmt: Optional[str] = None
    binary: bool = False
    check: Optional[Callable[["Message"], None]] = None


class Message(MutableMapping):
    """A message with an ordered, fixed set of properties.

    Only the properties listed in ``FIELDS`` can be stored; they are reachable
    both as mapping keys (``msg["displayName"]``) and as attributes
    (``msg.displayName``). Reading an attribute that has not been set returns
    ``None``; use ``"name" in msg`` to tell an absent property from a ``null``
    one.
    """

    FIELDS: ClassVar[Tuple[Field, ...]] = ()
    prop_list: ClassVar[Tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.prop_list = tuple(field.name for field in cls.FIELDS)

    def __init__(self, **properties: Any) -> None:
        object.__setattr__(self, "_values", {})
        for name, value in properties.items():
            self[name] = value

    # Mapping protocol

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in self.prop_list:
            raise KeyError(f"'{key}' is not a property of {type(self).__name__}")
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return (name for name in self.prop_list if name in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and name in type(self).prop_list:
            return self._values.get(name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self.prop_list:
            self[name] = value
        else:
            object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name in self.prop_list:
            self._values.pop(name, None)
        else:
            object.__delattr__(self, name)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Message):
            return type(self) is type(other) and self._values == other._values
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_object()!r})"

    # Serialization

    def to_object(self) -> Dict[str, Any]:
        """Return a plain ``dict`` holding the properties that are set."""

        return {name: self._values[name] for name in self}

    def to_string(self) -> str:
        return json.dumps(self.to_object(), separators=(",", ":"), ensure_ascii=False)

    def __str__(self) -> str:
        return self.to_string()

    def to_human_string(self) -> str:
        """Render the message for people, with binary properties hex dumped."""

        return type(self).describe(self)

    def to_human_html(self) -> str:
        return self.to_human_string().replace(" ", "&nbsp;").replace("\n", "<br>")

    @classmethod
    def describe(cls, obj: Any) -> str:
        """Render ``obj`` as interpreted by this message class."""

        msg = cls.from_json(obj)
        msg.decode_binary_properties()
        return f"[{cls.__name__}] " + stringify_obj(msg.to_object(), 0)

    @classmethod
    def from_json(cls: Type[_M], json_value: Any = MISSING) -> _M:
        """Create a message from a JSON string or an already parsed mapping.

        The result is not validated. Properties that this class does not
        recognise are dropped and values are copied, so later coercion never
        touches ``json_value``.
        """

        obj = json_value
        if isinstance(json_value, str):
            try:
                obj = json.loads(json_value)
            except json.JSONDecodeError as exc:
                raise MessageParseError("error parsing JSON string") from exc

        if not isinstance(obj, Mapping):
            raise MessageParseError(
                "could not coerce 'json' argument to an object: "
                f"'{describe_value(json_value)}'"
            )

        msg = cls()
        for name in cls.prop_list:
            if name in obj:
                msg._values[name] = _copy_tree(obj[name])

        logger.debug("Parsed %s with properties %s", cls.__name__, list(msg))
        return msg

    # Validation and binary coercion

    def validate(self) -> None:
        """Raise :class:`ValidationError` unless every property is well formed."""

        raise NotImplementedError("not implemented")

    def validate_fields(self, fields: Optional[Iterable[Field]] = None) -> None:
        for field in type(self).FIELDS if fields is None else fields:
            if field.fmt is not None:
                checker = check_format if field.required else check_optional_format
                checker(self, field.name, field.fmt)
            elif field.shape is not None:
                checker = check_type if field.required else check_optional_type
                checker(self, field.name, field.shape)
            if field.check is not None:
                field.check(self)

    def decode_binary_properties(self) -> None:
        """Convert base64url properties to ``bytes``."""

        for field in self._binary_fields():
            self._values[field.name] = coerce_to_bytes(
                self._values.get(field.name, MISSING), field.name
            )

    def encode_binary_properties(self) -> None:
        """Convert ``bytes`` properties back to base64url."""

        for field in self._binary_fields(encoding=True):
            self._values[field.name] = coerce_to_base64url(
                self._values.get(field.name, MISSING), field.name
            )

    def _binary_fields(self, encoding: bool = False) -> Iterator[Field]:
        for field in type(self).FIELDS:
            if not field.binary:
                continue
            value = self._values.get(field.name)
            # Optional properties are only coerced when they hold a value.
            if field.required or (value is not None if encoding else value):
                yield field


def decode_member(container: Any, key: str, label: str, optional: bool = False) -> None:
    """Decode ``container[key]`` in place; ``optional`` skips empty values."""

    value = container.get(key, MISSING) if isinstance(container, Mapping) else MISSING
    if optional and not value:
        return
    data = coerce_to_bytes(value, label)
    container[key] = data


def encode_member(container: Any, key: str, label: str, optional: bool = False) -> None:
    """Encode ``container[key]`` in place; ``optional`` skips absent values."""

    value = container.get(key, MISSING) if isinstance(container, Mapping) else MISSING
    if optional and (value is MISSING or value is None):
        return
    text = coerce_to_base64url(value, label)
    container[key] = text
