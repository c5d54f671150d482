"""
Schema reflection - Derive schema strings from annotated dataclasses.

A record declares its ABI shape once, through field metadata:

    @dataclass
    class Vote:
        event_id: int = abi_field("uint256", "eventId", 1)
        vote_index: int = abi_field("uint8", "voteIndex", 2)
        details: Details = abi_field("tuple", "details", 3)

and the schema string is derived from it:

    "uint256 eventId, uint8 voteIndex, tuple(uint8 voteIndex, bool isValid) details"

Fields are ordered by their explicit ``order``, not by declaration order.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import typing
from dataclasses import dataclass
from typing import Any, Optional, Union

from .errors import InvalidSchemaError

ABI_METADATA_KEY = "abi"
TUPLE_KIND = "tuple"

_ARRAY_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)


@dataclass(frozen=True)
class AbiParameter:
    type: str
    name: str
    order: int
    struct: Optional[type] = None


def abi_field(abi_type: str, name: str, order: int, **kwargs: Any) -> Any:
    """
    Declare a dataclass field as an ABI parameter.

    Args:
        abi_type: ABI type name ("uint256", "string", "tuple", ...)
        name: Parameter name as it appears in the schema string
        order: Position of the parameter in the schema
        struct: Dataclass of a tuple field. Needed when the field's
            annotation names a class that is not a module global.
        **kwargs: Passed through to ``dataclasses.field`` (default, ...)
    """
    struct = kwargs.pop("struct", None)
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[ABI_METADATA_KEY] = AbiParameter(abi_type, name, order, struct)
    return dataclasses.field(metadata=metadata, **kwargs)


def abi_parameters(cls: type) -> list[tuple[dataclasses.Field, AbiParameter, Any]]:
    """Annotated fields of ``cls`` as (field, parameter, type hint), by order."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    annotated = [
        (f, f.metadata[ABI_METADATA_KEY])
        for f in dataclasses.fields(cls)
        if isinstance(f.metadata.get(ABI_METADATA_KEY), AbiParameter)
    ]
    # structs declared with struct= resolve string annotations of local classes
    localns = {p.struct.__name__: p.struct for _, p in annotated if p.struct is not None}
    try:
        hints = typing.get_type_hints(cls, localns=localns)
    except NameError as exc:
        raise InvalidSchemaError(
            f"Cannot resolve the annotations of {cls.__name__}: {exc}. "
            f"Pass struct=<dataclass> to abi_field for tuple fields of local classes"
        ) from exc

    found = [(f, param, hints.get(f.name, Any)) for f, param in annotated]
    return sorted(found, key=lambda item: item[1].order)


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) is Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def is_array_hint(hint: Any) -> bool:
    hint = _unwrap_optional(hint)
    if hint in (list, tuple):
        return True
    return typing.get_origin(hint) in _ARRAY_ORIGINS


def struct_type(hint: Any) -> type:
    """The dataclass behind a tuple-kind field (element type for arrays)."""
    hint = _unwrap_optional(hint)
    if is_array_hint(hint):
        args = typing.get_args(hint)
        hint = args[0] if args else Any
    if not (isinstance(hint, type) and dataclasses.is_dataclass(hint)):
        raise TypeError(f"Tuple parameter must be typed as a dataclass, got {hint!r}")
    return hint


def reflect_schema_string(type_or_obj: Any, include_names: bool = False) -> str:
    """
    Build the schema string for an annotated dataclass.

    Args:
        type_or_obj: The dataclass, or an instance of it
        include_names: Emit "type name" pairs joined by ", " (schema form)
            instead of bare types joined by "," (signature form)

    Returns:
        e.g. "uint256 value, string name" or "uint256,string"
    """
    cls = type_or_obj if isinstance(type_or_obj, type) else type(type_or_obj)

    parts: list[str] = []
    for _, param, hint in abi_parameters(cls):
        kind = param.type.lower().replace("[]", "").strip()
        name = param.name.strip()
        array = "[]" if is_array_hint(hint) else ""

        if kind == TUPLE_KIND:
            inner = reflect_schema_string(param.struct or struct_type(hint), include_names)
            piece = f"{TUPLE_KIND if include_names else ''}({inner}){array}"
        else:
            piece = f"{kind}{array}"

        if include_names:
            piece = f"{piece} {name}"
        parts.append(piece)

    separator = ", " if include_names else ","
    return separator.join(parts).strip().rstrip(",")


def abi_values(obj: Any) -> tuple:
    """Field values of an annotated dataclass instance, in parameter order.

    Nested tuple fields become Python tuples, arrays become lists.
    """
    values: list[Any] = []
    for f, param, hint in abi_parameters(type(obj)):
        value = getattr(obj, f.name)
        kind = param.type.lower().replace("[]", "").strip()
        if kind == TUPLE_KIND:
            if is_array_hint(hint):
                value = [abi_values(item) for item in value]
            else:
                value = abi_values(value)
        elif is_array_hint(hint):
            value = list(value)
        values.append(value)
    return tuple(values)
