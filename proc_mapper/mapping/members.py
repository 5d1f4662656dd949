"""Member discovery and assignment on caller-supplied target types.

A column maps to a member only when the names are identical. Members are
discovered at run time from, in order: properties with a setter, Pydantic
model fields, dataclass fields, class annotations, then plain class or
instance attributes. Nothing here is cached between calls.
"""

from __future__ import annotations

import dataclasses
import inspect
import sys
import types
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Literal, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from proc_mapper.core.exceptions import MemberNotFoundError, TypeMismatchError

_MISSING = object()


class _Undeclared:
    def __repr__(self) -> str:
        return "<undeclared>"


UNDECLARED: Any = _Undeclared()


@dataclass(frozen=True)
class MemberInfo:
    """A writable member and its declared type (``UNDECLARED`` if none)."""

    name: str
    declared_type: Any = UNDECLARED


def _namespaces(owner: Any) -> tuple[dict[str, Any], dict[str, Any] | None]:
    if isinstance(owner, type):
        module = sys.modules.get(owner.__module__)
        return getattr(module, "__dict__", {}), dict(vars(owner))
    return getattr(inspect.unwrap(owner), "__globals__", {}), None


def _resolve_one(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any] | None) -> Any:
    # Evaluated as a class annotation so ClassVar stays legal.
    holder = type("_Annotation", (), {"__annotations__": {"value": annotation}})
    try:
        return get_type_hints(holder, globalns, localns, include_extras=True)["value"]
    except Exception:
        return UNDECLARED


def _safe_type_hints(obj: Any) -> dict[str, Any]:
    """Resolved annotations of ``obj``.

    When some annotation cannot be resolved (e.g. a name imported only
    under ``TYPE_CHECKING``), each one is resolved on its own and only
    the failing ones become ``UNDECLARED``.
    """
    try:
        return get_type_hints(obj, include_extras=True)
    except Exception:
        pass

    owners = reversed(obj.__mro__) if isinstance(obj, type) else [obj]
    hints: dict[str, Any] = {}
    for owner in owners:
        if owner is object:
            continue
        try:
            raw = inspect.get_annotations(owner)
        except Exception:
            continue
        globalns, localns = _namespaces(owner)
        for name, annotation in raw.items():
            hints[name] = _resolve_one(annotation, globalns, localns)
    return hints


def _property_type(prop: property) -> Any:
    if prop.fset is not None:
        hints = _safe_type_hints(prop.fset)
        hints.pop("return", None)
        if hints:
            return next(iter(hints.values()))
    if prop.fget is not None:
        return _safe_type_hints(prop.fget).get("return", UNDECLARED)
    return UNDECLARED


def _is_classvar(tp: Any) -> bool:
    return tp is ClassVar or get_origin(tp) is ClassVar


def describe_member(target_class: type, instance: Any, name: str) -> MemberInfo | None:
    """Find a writable member called ``name``; None when there is none."""
    static = inspect.getattr_static(target_class, name, _MISSING)
    if isinstance(static, property):
        if static.fset is None:
            return None
        return MemberInfo(name, _property_type(static))

    if issubclass(target_class, BaseModel):
        if target_class.model_config.get("frozen"):
            return None
        field = target_class.model_fields.get(name)
        if field is None:
            return None
        return MemberInfo(name, field.annotation)

    if dataclasses.is_dataclass(target_class):
        if target_class.__dataclass_params__.frozen:  # type: ignore[attr-defined]
            return None
        hints = _safe_type_hints(target_class)
        for dc_field in dataclasses.fields(target_class):
            if dc_field.name == name:
                return MemberInfo(name, hints.get(name, UNDECLARED))

    hints = _safe_type_hints(target_class)
    if name in hints:
        if _is_classvar(hints[name]):
            return None
        return MemberInfo(name, hints[name])

    if static is not _MISSING and not callable(static) and not isinstance(
        static, (classmethod, staticmethod)
    ):
        return MemberInfo(name)

    instance_dict = getattr(instance, "__dict__", None)
    if instance_dict is not None and name in instance_dict:
        return MemberInfo(name)

    return None


def is_compatible(value: Any, declared_type: Any) -> bool:
    """Whether ``value`` may be stored in a member declared as ``declared_type``.

    None is always accepted. Beyond that only what Python's type model
    admits without conversion: ``int`` for ``float``, any arm of a union.
    """
    if value is None or declared_type is UNDECLARED:
        return True
    if declared_type is Any or declared_type is object:
        return True

    origin = get_origin(declared_type)
    if origin is Union or origin is types.UnionType:
        return any(is_compatible(value, arm) for arm in get_args(declared_type))
    if origin is Annotated:
        return is_compatible(value, get_args(declared_type)[0])
    if origin is Literal:
        return value in get_args(declared_type)
    if origin is not None:
        return isinstance(value, origin) if isinstance(origin, type) else True

    supertype = getattr(declared_type, "__supertype__", None)
    if supertype is not None:
        return is_compatible(value, supertype)

    if not isinstance(declared_type, type):
        # TypeVar, string annotation and similar
        return True
    if declared_type is float:
        return isinstance(value, (int, float))
    if declared_type is complex:
        return isinstance(value, (int, float, complex))
    return isinstance(value, declared_type)


def assign(instance: Any, member: MemberInfo, value: Any) -> None:
    """Check ``value`` against the member's declared type and store it."""
    target_name = type(instance).__name__
    if not is_compatible(value, member.declared_type):
        raise TypeMismatchError(target_name, member.name, member.declared_type, value)
    try:
        setattr(instance, member.name, value)
    except AttributeError as e:
        raise MemberNotFoundError(target_name, member.name) from e
    except (TypeError, ValueError) as e:
        raise TypeMismatchError(target_name, member.name, member.declared_type, value) from e
