# Copyright (c) 2025 NASK. All rights reserved.

"""
Field-level access to the host's *record-like* values.

The optics provided by *optika* treat the values they focus on as
opaque structural records.  This module knows how to:

* validate a field key against a *source* -- being either a type with
  declared fields (a dataclass, a named tuple, a `TypedDict`, an
  *attrs* class, or a class with annotations and/or `__slots__`) or a
  *representative instance* (see: `validate_field()`);
* get a field's value (see: `get_field()` and `get_field_or_none()`),
  or tell whether an index is out of range (see: `is_missing_index()`);
* make a shallow copy of a value, with one field replaced (see:
  `with_field()`) -- everything else keeps its identity.
"""

import copy
import dataclasses
import inspect
import types
import typing
from collections.abc import (
    Mapping,
    Sequence,
)

from optika.exceptions import (
    UnknownFieldError,
    UnsupportedSourceError,
)


_TEXT_TYPES = (str, bytes, bytearray)

_NoneType = type(None)


#
# Public helpers
#

def get_field(obj, key):
    """
    Get the value of the specified field of `obj`.

    >>> get_field({'name': 'John'}, 'name')
    'John'
    >>> get_field(['a', 'b'], 1)
    'b'
    >>> import collections
    >>> Point = collections.namedtuple('Point', 'x, y')
    >>> get_field(Point(1, 2), 'y'), get_field(Point(1, 2), 0)
    (2, 1)
    >>> get_field(types.SimpleNamespace(spam='ham'), 'spam')
    'ham'
    """
    if isinstance(obj, Mapping):
        return obj[key]
    if isinstance(key, int) and _is_non_text_sequence(obj):
        return obj[key]
    return getattr(obj, key)


def get_field_or_none(obj, key):
    """
    Like `get_field()` but returning `None` if the field is missing.

    >>> get_field_or_none({'name': 'John'}, 'address') is None
    True
    >>> get_field_or_none(['a'], 5) is None
    True
    >>> get_field_or_none(types.SimpleNamespace(), 'spam') is None
    True
    >>> get_field_or_none({'name': 'John'}, 'name')
    'John'
    """
    if isinstance(obj, Mapping):
        return obj.get(key)
    if isinstance(key, int) and _is_non_text_sequence(obj):
        try:
            return obj[key]
        except IndexError:
            return None
    return getattr(obj, key, None)


def is_missing_index(obj, key):
    """
    Tell whether `key` is a sequence index that is out of the range of
    the `obj` sequence (such a field cannot be set with `with_field()`).

    >>> is_missing_index(['a'], 3)
    True
    >>> is_missing_index(['a'], -1)
    False
    >>> is_missing_index({'a': 1}, 3)
    False
    """
    return (isinstance(key, int)
            and _is_non_text_sequence(obj)
            and not _is_valid_index(obj, key))


def with_field(obj, key, value):
    """
    Get a shallow copy of `obj`, with the specified field set to `value`.

    The type of `obj` is preserved; `obj` itself is never modified.

    >>> person = {'name': 'John', 'address': {'city': 'NYC'}}
    >>> updated = with_field(person, 'name', 'Jane')
    >>> updated
    {'name': 'Jane', 'address': {'city': 'NYC'}}
    >>> updated['address'] is person['address']
    True
    >>> person['name']
    'John'

    >>> with_field({'name': 'John'}, 'age', 30)   # (for mappings: key added if missing)
    {'name': 'John', 'age': 30}
    >>> with_field(['a', 'b', 'c'], -1, 'C')
    ['a', 'b', 'C']
    >>> with_field(('a', 'b', 'c'), 1, 'B')
    ('a', 'B', 'c')

    >>> @dataclasses.dataclass(frozen=True)
    ... class Circle:
    ...     radius: int
    ...     kind: str = 'circle'
    ...
    >>> with_field(Circle(5), 'radius', 7)
    Circle(radius=7, kind='circle')

    >>> with_field('text', 0, 'T')   # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.UnsupportedSourceError: [optic-related error] unsupported source 'text': ...
    """
    if isinstance(obj, _TEXT_TYPES):
        raise UnsupportedSourceError(
            obj, 'text/binary values cannot be updated field by field')
    if isinstance(obj, dict):
        new = copy.copy(obj)
        new[key] = value
        return new
    if isinstance(obj, Mapping):
        try:
            return type(obj)({**obj, key: value})
        except TypeError as exc:
            raise UnsupportedSourceError(
                obj, 'cannot rebuild the mapping ({})'.format(exc)) from exc
    if _is_named_tuple(obj):
        if isinstance(key, int):
            key = obj._fields[key]
        return obj._replace(**{key: value})
    if isinstance(obj, list):
        new = copy.copy(obj)
        new[key] = value
        return new
    if isinstance(obj, tuple):
        index = range(len(obj))[key]
        items = obj[:index] + (value,) + obj[index+1:]
        return items if type(obj) is tuple else type(obj)(items)
    if isinstance(obj, Sequence):
        raise UnsupportedSourceError(
            obj, 'only lists and tuples are supported as sequences')
    if dataclasses.is_dataclass(obj):
        if key in _dataclass_init_field_names(type(obj)):
            return dataclasses.replace(obj, **{key: value})
    elif callable(getattr(type(obj), '__replace__', None)):
        return obj.__replace__(**{key: value})
    if not isinstance(key, str):
        raise UnsupportedSourceError(
            obj, 'attribute name must be a str, got {!r}'.format(key))
    new = copy.copy(obj)
    # (`object.__setattr__()` is used to make it work
    # also with frozen dataclasses and *attrs* classes)
    object.__setattr__(new, key, value)
    return new


def validate_field(source, key, *, optional=False):
    """
    Check that `key` is a valid field of `source`; return the field's
    declared type (or `None` if it cannot be determined).

    Args:
        `source`:
            A type with declared fields *or* a representative instance.
        `key`:
            The field key (a name or, for sequences, an index; for
            named tuples, both types and instances, a name or an index).

    Kwargs:
        `optional` (default: False):
            If true, the field is allowed to be missing (as needed for
            prisms): for `TypedDict` types also non-required keys are
            accepted, for mapping instances any hashable key is
            accepted; also, the returned declared type (if any) is
            stripped of `Optional[...]`.

    Raises:
        `UnknownFieldError` -- if there is no such field.
        `UnsupportedSourceError` -- if the fields of `source` cannot be
        determined.

    >>> @dataclasses.dataclass
    ... class Person:
    ...     name: str
    ...     age: int
    ...     nickname: typing.Optional[str] = None
    ...
    >>> validate_field(Person, 'name')
    <class 'str'>
    >>> validate_field(Person, 'nickname') == typing.Optional[str]
    True
    >>> validate_field(Person, 'nickname', optional=True)
    <class 'str'>
    >>> validate_field(Person, 'nmae')                     # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.UnknownFieldError: [optic-related error] unknown field 'nmae' ...

    >>> Point = typing.NamedTuple('Point', [('x', int), ('y', float)])
    >>> validate_field(Point, 1)
    <class 'float'>
    >>> validate_field(Point, 2)                           # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.UnknownFieldError: [optic-related error] unknown field 2 ...

    >>> validate_field({'name': 'John', 'age': 30}, 'age')
    <class 'int'>
    >>> validate_field({'name': 'John'}, 'age')            # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.UnknownFieldError: [optic-related error] unknown field 'age' ...
    >>> validate_field({'name': 'John'}, 'age', optional=True) is None
    True

    >>> validate_field(dict, 'name')                       # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.UnsupportedSourceError: [optic-related error] unsupported source <class 'dict'>: ...
    """
    if _is_typing_construct(source):
        raise UnsupportedSourceError(
            source,
            'typing constructs cannot be used as sources; pass a '
            'concrete type or a representative instance instead')
    if isinstance(source, type):
        declared_type = _validate_type_field(source, key, optional)
    else:
        declared_type = _validate_instance_field(source, key, optional)
    if optional:
        declared_type = _strip_optional(declared_type)
    return declared_type


def declared_source_type(source):
    """
    Get the type being the *declared source type* of optics created for
    the given `source` (being a type or a representative instance).

    >>> declared_source_type(dict)
    <class 'dict'>
    >>> declared_source_type({"a": 1})
    <class 'dict'>
    >>> declared_source_type(typing.Optional[int]) == typing.Optional[int]
    True
    """
    if isinstance(source, type) or _is_typing_construct(source):
        return source
    return type(source)


#
# Non-public helpers
#

def _validate_type_field(source_type, key, optional):
    fields = _get_declared_fields(source_type)
    if fields is None:
        raise UnsupportedSourceError(
            source_type,
            'cannot determine its fields (no declared fields); '
            'pass a representative instance instead')
    if _is_named_tuple_type(source_type) and isinstance(key, int):
        # (positional access, as for named tuple instances)
        if not _is_valid_index(source_type._fields, key):
            raise UnknownFieldError(key, source=source_type)
        key = source_type._fields[key]
    if key not in fields:
        raise UnknownFieldError(key, source=source_type)
    if (not optional
          and typing.is_typeddict(source_type)
          and key not in source_type.__required_keys__):
        raise UnknownFieldError(key, source=source_type)
    return fields[key]


def _validate_instance_field(instance, key, optional):
    if isinstance(instance, _TEXT_TYPES):
        raise UnsupportedSourceError(
            instance, 'text/binary values cannot be used as sources')
    if isinstance(instance, Mapping):
        try:
            present = key in instance
        except TypeError as exc:
            # (unhashable key)
            raise UnknownFieldError(key, source=instance) from exc
        if present:
            return _type_of_value(instance[key])
        if optional:
            return None
        raise UnknownFieldError(key, source=instance)
    if _is_named_tuple(instance):
        if isinstance(key, int):
            if _is_valid_index(instance, key):
                return _type_of_value(instance[key])
        elif key in instance._fields:
            return _type_of_value(getattr(instance, key))
        raise UnknownFieldError(key, source=instance)
    if _is_non_text_sequence(instance):
        if isinstance(key, int) and _is_valid_index(instance, key):
            return _type_of_value(instance[key])
        raise UnknownFieldError(key, source=instance)
    if dataclasses.is_dataclass(instance):
        fields = _get_declared_fields(type(instance))
        if key not in fields:
            raise UnknownFieldError(key, source=instance)
        return fields[key] or _type_of_value(getattr(instance, key))
    if not isinstance(key, str) or not hasattr(instance, key):
        raise UnknownFieldError(key, source=instance)
    return _type_of_value(getattr(instance, key))


def _get_declared_fields(source_type):
    # -> a dict that maps field names to declared field types
    #    (`None` if not resolvable) -- or `None` if the fields
    #    of the given type cannot be determined
    hints = _get_resolved_hints(source_type)
    if dataclasses.is_dataclass(source_type):
        return {f.name: hints.get(f.name) for f in dataclasses.fields(source_type)}
    if _is_named_tuple_type(source_type):
        return {name: hints.get(name) for name in source_type._fields}
    if typing.is_typeddict(source_type):
        return {name: hints.get(name) for name in (source_type.__required_keys__
                                                   | source_type.__optional_keys__)}
    attrs_attrs = getattr(source_type, '__attrs_attrs__', None)
    if attrs_attrs is not None:
        return {a.name: hints.get(a.name, a.type) for a in attrs_attrs}
    if source_type.__module__ == 'builtins' or issubclass(source_type, (Mapping, Sequence)):
        return None
    fields = {}
    for cls in reversed(source_type.__mro__):
        if cls is object:
            continue
        for name in _own_annotations(cls):
            if typing.get_origin(hints.get(name)) is typing.ClassVar:
                continue
            fields[name] = hints.get(name)
        slots = vars(cls).get('__slots__', ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ('__dict__', '__weakref__'):
                fields.setdefault(name, None)
    return fields or None


def _get_resolved_hints(source_type):
    try:
        return typing.get_type_hints(source_type)
    except (NameError, TypeError, AttributeError):
        # (unresolvable forward references etc. -- then
        # only non-string annotations can be made use of)
        hints = {}
        for cls in reversed(source_type.__mro__):
            for name, annotation in _own_annotations(cls).items():
                hints[name] = None if isinstance(annotation, str) else annotation
        return hints


def _own_annotations(cls):
    try:
        return inspect.get_annotations(cls)
    except NameError:
        return {}


def _strip_optional(declared_type):
    # `Optional[X]` -> `X` (and `X | None` -> `X`)
    if typing.get_origin(declared_type) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(declared_type) if arg is not _NoneType]
        if len(args) == 1:
            return args[0]
        return typing.Union[tuple(args)]
    return declared_type


def _dataclass_init_field_names(dataclass_type):
    return {f.name for f in dataclasses.fields(dataclass_type) if f.init}


def _type_of_value(value):
    return None if value is None else type(value)


def _is_valid_index(seq, index):
    return -len(seq) <= index < len(seq)


def _is_non_text_sequence(obj):
    return isinstance(obj, Sequence) and not isinstance(obj, _TEXT_TYPES)


def _is_named_tuple(obj):
    return isinstance(obj, tuple) and _is_named_tuple_type(type(obj))


def _is_named_tuple_type(t):
    return (isinstance(t, type)
            and issubclass(t, tuple)
            and isinstance(getattr(t, '_fields', None), tuple)
            and callable(getattr(t, '_replace', None)))


def _is_typing_construct(obj):
    if obj is typing.Any:
        return True
    return not isinstance(obj, type) and typing.get_origin(obj) is not None
