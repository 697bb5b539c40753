# Copyright (c) 2025 NASK. All rights reserved.

"""
Composable optics over immutable nested data: lenses, prisms and isos.

* A *lens* (`Lens`) focuses on a field guaranteed to exist: `get(s)`
  is total, `set(update)(s)` returns an updated shallow copy of `s`.

* A *prism* (`Prism`) focuses on a field that may be absent (or that
  depends on the variant of a discriminated union): `get(s)` returns
  `None` when the focused value is absent; `set(update)(s)` with a
  *literal* value delegates to the prism's own setter (which may
  *materialize* the branch), whereas `set(update)(s)` with an *updater
  function* is a no-op (returns `s` itself) when the value is absent.

* An *iso* (`Iso`) is a pair of total, mutually inverse conversions:
  `to(s)` and `from_(a)`.

Any two optics can be composed (see: `compose()`); the kind of the
result is determined by the kinds of the operands:

    outer \\ inner | lens    prism   iso
    ---------------+-----------------------
    lens           | lens    prism   lens
    prism          | prism   prism   prism
    iso            | lens    prism   iso

A small example:

>>> person = {'name': 'John', 'age': 30,
...           'address': {'street': '123 Main St', 'city': 'NYC'}}
>>> city = compose(prop('address', person), prop('city', person['address']))
>>> city
<Lens 'address.city' dict -> str>
>>> city.get(person)
'NYC'
>>> moved = city.set('LA')(person)
>>> moved['address']
{'street': '123 Main St', 'city': 'LA'}
>>> person['address']['city']             # (the original is intact)
'NYC'
>>> city.set(str.lower)(person)['address']['city']
'nyc'

Each `set()` accepts either a literal value or an *updater* function;
see the `optika.updaters` module for details (especially, if the
focused values may themselves be callables).

The *declared* source/target types of optics are available via the
`source`/`target` attributes (see also: `source_type_of()` and
`target_type_of()`); they have no influence on the behavior of the
optics, but `compose()` makes use of them to reject mismatched
compositions early.
"""

from collections.abc import Callable
from typing import (
    Any,
    Generic,
    Iterable,
    Optional,
    TypeVar,
)

from optika.config import settings
from optika.exceptions import (
    IncompatibleOpticTypesError,
    UnsupportedCompositionError,
)
from optika.log_helpers import get_logger
from optika.records import (
    declared_source_type,
    get_field,
    get_field_or_none,
    is_missing_index,
    validate_field,
    with_field,
)
from optika.updaters import (
    Replace,
    UpdateArg,
    apply_update,
    as_update,
    is_function_update,
)


LOGGER = get_logger(__name__)


S = TypeVar('S')
A = TypeVar('A')
B = TypeVar('B')


#
# Optic kind tags
#

LENS = 'lens'
PRISM = 'prism'
ISO = 'iso'

OPTIC_KINDS = frozenset({LENS, PRISM, ISO})

# (names of the attributes that hold the declared types of an optic)
_TYPE_ATTR_NAMES = frozenset({'source', 'target'})


#
# The optic value model
#

class Optic(Generic[S, A]):

    """
    The common base of `Lens`, `Prism` and `Iso`.

    Optics are immutable bundles of pure functions, tagged with their
    kind (the `kind` attribute: one of `LENS`, `PRISM`, `ISO`). It is
    the tag -- not the class hierarchy -- that the composition engine
    dispatches on.

    The `inferred_types` attribute is a frozenset of the names of those
    declared-type attributes (`'source'` and/or `'target'`) whose values
    were merely *inferred* from a representative instance (e.g., the
    runtime type of one example field value), rather than declared.
    `compose()` does not check inferred types against each other.
    """

    __slots__ = ('source', 'target', 'label', 'inferred_types')

    kind: str = None  # (must be set in concrete subclasses)

    def _init_meta(self, source, target, label, inferred_types=()):
        inferred_types = frozenset(inferred_types)
        if not inferred_types <= _TYPE_ATTR_NAMES:
            raise ValueError('`inferred_types` may include only {}, got {!r}'.format(
                ', '.join(map(repr, sorted(_TYPE_ATTR_NAMES))), sorted(inferred_types)))
        object.__setattr__(self, 'source', source)
        object.__setattr__(self, 'target', target)
        object.__setattr__(self, 'label', label)
        object.__setattr__(self, 'inferred_types', inferred_types)

    def __setattr__(self, name, value):
        raise AttributeError('{} instances are immutable'.format(self.__class__.__qualname__))

    def __delattr__(self, name):
        raise AttributeError('{} instances are immutable'.format(self.__class__.__qualname__))

    def __repr__(self):
        return '<{} {}{} -> {}>'.format(
            self.__class__.__qualname__,
            ('' if self.label is None else '{!r} '.format(self.label)),
            _type_repr(self.source),
            _type_repr(self.target))

    def compose(self, inner, *more):
        """A shortcut for `compose(self, inner, *more)`."""
        return compose(self, inner, *more)

    @classmethod
    def _new(cls, *, source=None, target=None, label=None, inferred_types=(), **functions):
        # (used by the composition engine: builds an optic from
        # ready functions, without any normalization)
        optic = object.__new__(cls)
        for name, func in functions.items():
            object.__setattr__(optic, name, func)
        optic._init_meta(source, target, label, inferred_types)
        return optic


class Lens(Optic[S, A]):

    """
    A lens: `get(s)` is total, `set(update)(s)` returns an updated copy.

    Constructor args:
        `get`:
            A total function: source -> focused value.
        `set`:
            A *base* setter: focused value -> (source -> new source).
            It is always given a *literal* value -- the constructed
            lens normalizes the *update* argument of its `set()` (see:
            `optika.updaters`) by itself.

    Constructor kwargs (all optional):
        `source`, `target`:
            The declared source and target types.
        `label`:
            A human-readable description of the focused path.
        `inferred_types`:
            An iterable of the names (`'source'`/`'target'`) of those
            of the declared types that were inferred from a sample
            instance (such types are not checked by `compose()`).

    >>> pair_first = Lens(lambda p: p[0], lambda v: lambda p: (v, p[1]), label='first')
    >>> pair_first.get((1, 2))
    1
    >>> pair_first.set(10)((1, 2))
    (10, 2)
    >>> pair_first.set(lambda x: x + 1)((1, 2))
    (2, 2)
    >>> pair_first.kind
    'lens'
    """

    __slots__ = ('get', 'set')

    kind = LENS

    def __init__(self,
                 get: Callable[[S], A],
                 set: Callable[[A], Callable[[S], S]],
                 *,
                 source: Any = None,
                 target: Any = None,
                 label: Optional[str] = None,
                 inferred_types: Iterable[str] = ()):
        object.__setattr__(self, 'get', get)
        object.__setattr__(self, 'set', _make_lens_setter(get, set))
        self._init_meta(source, target, label, inferred_types)


class Prism(Optic[S, A]):

    """
    A prism: `get(s)` may return `None` (absent), `set(update)(s)`
    returns an updated copy -- or `s` itself if `update` is a function
    and the focused value is absent.

    Constructor args:
        `get`:
            A partial function: source -> focused value or `None`.
        `set`:
            A setter: focused value -> (source -> new source); it is
            always given a *literal* value, so both a *base* setter and
            a setter that accepts also updater functions are OK.  It is
            this setter that decides whether an absent branch is
            materialized when a literal is set.

    Constructor kwargs (all optional): see `Lens`.

    >>> circle = Prism(lambda shape: shape if shape['type'] == 'circle' else None,
    ...                lambda c: lambda shape: c)
    >>> circle.get({'type': 'circle', 'radius': 5})
    {'type': 'circle', 'radius': 5}
    >>> circle.get({'type': 'square', 'side': 10}) is None
    True
    >>> square = {'type': 'square', 'side': 10}
    >>> circle.set(lambda c: dict(c, radius=1))(square) is square
    True
    >>> circle.set({'type': 'circle', 'radius': 1})(square)
    {'type': 'circle', 'radius': 1}
    """

    __slots__ = ('get', 'set')

    kind = PRISM

    def __init__(self,
                 get: Callable[[S], Optional[A]],
                 set: Callable[[A], Callable[[S], S]],
                 *,
                 source: Any = None,
                 target: Any = None,
                 label: Optional[str] = None,
                 inferred_types: Iterable[str] = ()):
        object.__setattr__(self, 'get', get)
        object.__setattr__(self, 'set', _make_prism_setter(get, set, label))
        self._init_meta(source, target, label, inferred_types)


class Iso(Optic[S, A]):

    """
    An isomorphism: `to(s)` and `from_(a)` are total and (by the
    caller's contract, not verified) mutually inverse.

    >>> num_str = Iso(str, int, source=int, target=str)
    >>> num_str.to(42)
    '42'
    >>> num_str.from_('123')
    123
    >>> num_str.reverse()
    <Iso str -> int>
    >>> num_str.reverse().to('7')
    7
    """

    __slots__ = ('to', 'from_')

    kind = ISO

    def __init__(self,
                 to: Callable[[S], A],
                 from_: Callable[[A], S],
                 *,
                 source: Any = None,
                 target: Any = None,
                 label: Optional[str] = None,
                 inferred_types: Iterable[str] = ()):
        object.__setattr__(self, 'to', to)
        object.__setattr__(self, 'from_', from_)
        self._init_meta(source, target, label, inferred_types)

    def reverse(self) -> 'Iso[A, S]':
        """Get the inverse isomorphism."""
        swapped = {'source': 'target', 'target': 'source'}
        return Iso(self.from_, self.to,
                   source=self.target,
                   target=self.source,
                   label=(None if self.label is None else '~' + self.label),
                   inferred_types={swapped[name] for name in self.inferred_types})


def _make_lens_setter(get, base_set):
    def set(update: UpdateArg):
        upd = as_update(update)
        def setter(s):
            current = get(s) if is_function_update(upd) else None
            return base_set(apply_update(upd, current))(s)
        return setter
    return set


def _make_prism_setter(get, base_set, label):
    def set(update: UpdateArg):
        upd = as_update(update)
        def setter(s):
            current = None
            if is_function_update(upd):
                current = get(s)
                if current is None:
                    LOGGER.debug('prism %r: focused value absent, '
                                 'updater not applied', label)
                    return s
            return base_set(apply_update(upd, current))(s)
        return setter
    return set


#
# Primitive constructors
#

def lens(get: Callable[[S], A],
         set: Callable[[A], Callable[[S], S]],
         *,
         source: Any = None,
         target: Any = None,
         label: Optional[str] = None,
         inferred_types: Iterable[str] = ()) -> Lens[S, A]:
    """
    Make a custom lens (see: `Lens`).

    >>> upper_first = lens(lambda s: s[0], lambda c: lambda s: c + s[1:])
    >>> upper_first.set(str.upper)('spam')
    'Spam'
    """
    return Lens(get, set, source=source, target=target, label=label,
                inferred_types=inferred_types)


def prism_of(get: Callable[[S], Optional[A]],
             set: Callable[[A], Callable[[S], S]],
             *,
             source: Any = None,
             target: Any = None,
             label: Optional[str] = None,
             inferred_types: Iterable[str] = ()) -> Prism[S, A]:
    """
    Make a custom prism (see: `Prism`).

    >>> address = prism_of(lambda p: p.get('address'),
    ...                    lambda a: lambda p: dict(p, address=a),
    ...                    label='address')
    >>> address.get({'name': 'John'}) is None
    True
    >>> address.set({'city': 'LA'})({'name': 'John'})
    {'name': 'John', 'address': {'city': 'LA'}}
    """
    return Prism(get, set, source=source, target=target, label=label,
                 inferred_types=inferred_types)


def iso(to: Callable[[S], A],
        from_: Callable[[A], S],
        *,
        source: Any = None,
        target: Any = None,
        label: Optional[str] = None,
        inferred_types: Iterable[str] = ()) -> Iso[S, A]:
    """
    Make an isomorphism (see: `Iso`).

    >>> celsius_kelvin = iso(lambda c: c + 273, lambda k: k - 273)
    >>> celsius_kelvin.to(0), celsius_kelvin.from_(300)
    (273, 27)
    """
    return Iso(to, from_, source=source, target=target, label=label,
               inferred_types=inferred_types)


def prop(key: Any, source: Any, *, label: Optional[str] = None) -> Lens:
    """
    Make a lens focused on the specified field of `source`.

    Args:
        `key`:
            A field name (or a key of a mapping, or an index of a
            sequence).
        `source`:
            The type of the values the lens will be applied to (a type
            with declared fields: a dataclass, a named tuple, a
            `TypedDict`, etc.) *or* a representative instance of it.

    Raises:
        `optika.exceptions.UnknownFieldError` if there is no such field.
        `optika.exceptions.UnsupportedSourceError` if the fields of
        `source` cannot be determined (see: `optika.records`).

    >>> import dataclasses
    >>> @dataclasses.dataclass(frozen=True)
    ... class Person:
    ...     name: str
    ...     age: int
    ...
    >>> name = prop('name', Person)
    >>> name
    <Lens 'name' Person -> str>
    >>> name.set('Jane')(Person('John', 30))
    Person(name='Jane', age=30)
    >>> prop('nmae', Person)                             # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.UnknownFieldError: [optic-related error] unknown field 'nmae' ...

    >>> first = prop(0, ['John', 'Jane'])
    >>> first.set('Bob')(['John', 'Jane'])
    ['Bob', 'Jane']
    """
    target = validate_field(source, key)
    return Lens(
        lambda s: get_field(s, key),
        lambda value: lambda s: with_field(s, key, value),
        source=declared_source_type(source),
        target=target,
        label=(_key_label(key) if label is None else label),
        inferred_types=_inferred_types_for(source))


def optional_prop(key: Any, source: Any, *, label: Optional[str] = None) -> Prism:
    """
    Make a prism focused on the specified *optional* field of `source`.

    The `get()` of the prism returns `None` if the field is missing (or
    is `None`); a literal `set()` writes the field (for mappings: adds
    the key if missing); a function `set()` is a no-op if the field is
    absent. For sequences, an index that is out of range is treated as
    an absent field that cannot be materialized: any `set()` is then a
    no-op.

    >>> person = {'name': 'A'}
    >>> address = optional_prop('address', person)
    >>> address.get(person) is None
    True
    >>> address.set(lambda a: a)(person) is person
    True
    >>> address.set({'city': 'LA'})(person)
    {'name': 'A', 'address': {'city': 'LA'}}
    >>> letters = ['a']
    >>> optional_prop(3, ['a', 'b', 'c', 'd']).set('z')(letters) is letters
    True
    """
    target = validate_field(source, key, optional=True)
    if label is None:
        label = _key_label(key)

    def base_set(value):
        def setter(s):
            if is_missing_index(s, key):
                LOGGER.debug('prism %r: index %r out of range, nothing set', label, key)
                return s
            return with_field(s, key, value)
        return setter

    return Prism(
        lambda s: get_field_or_none(s, key),
        base_set,
        source=declared_source_type(source),
        target=target,
        label=label,
        inferred_types=_inferred_types_for(source))


def _inferred_types_for(source):
    if isinstance(source, type):
        return frozenset()
    # (both types are derived from the given instance, not declared)
    return _TYPE_ATTR_NAMES


#
# The composition engine
#

def compose(outer: Optic, inner: Optic, *more: Optic) -> Optic:
    """
    Compose the given optics: `outer` (S -> A) with `inner` (A -> B),
    producing an optic S -> B; if more optics are given, they are
    composed successively (`compose(a, b, c)` is the same as
    `compose(compose(a, b), c)`).

    The kind of the resulting optic is determined by the kinds of the
    operands (see: `composed_kind()` and the table in the module's
    docs).

    Raises:
        `optika.exceptions.UnsupportedCompositionError` if any operand
        is not an optic.
        `optika.exceptions.IncompatibleOpticTypesError` if the declared
        target type of an outer optic is not compatible with the
        declared source type of the respective inner one (only plain
        classes are checked; the check can be switched off with the
        `check_declared_types` setting -- see: `optika.config`).

    >>> count = Lens(lambda m: m['count'], lambda c: lambda m: dict(m, count=c),
    ...              label='count', target=int)
    >>> as_str = Iso(str, int, source=int, target=str)
    >>> count_str = compose(count, as_str)
    >>> count_str
    <Lens 'count.<iso>' ? -> str>
    >>> count_str.get({'count': 7})
    '7'
    >>> count_str.set(lambda s: s + '0')({'count': 7})
    {'count': 70}

    >>> compose(count, 'not an optic')
    Traceback (most recent call last):
      ...
    optika.exceptions.UnsupportedCompositionError: [optic-related error] cannot compose lens (outer) with str instance (inner): not an optic
    """
    result = _compose_pair(outer, inner)
    for next_inner in more:
        result = _compose_pair(result, next_inner)
    return result


def composed_kind(outer_kind: str, inner_kind: str) -> str:
    """
    Get the kind of optic produced by composing optics of the given kinds.

    >>> composed_kind(LENS, LENS), composed_kind(LENS, PRISM), composed_kind(LENS, ISO)
    ('lens', 'prism', 'lens')
    >>> composed_kind(PRISM, LENS), composed_kind(PRISM, PRISM), composed_kind(PRISM, ISO)
    ('prism', 'prism', 'prism')
    >>> composed_kind(ISO, LENS), composed_kind(ISO, PRISM), composed_kind(ISO, ISO)
    ('lens', 'prism', 'iso')
    >>> composed_kind(ISO, 'traversal')
    Traceback (most recent call last):
      ...
    optika.exceptions.UnsupportedCompositionError: [optic-related error] cannot compose iso (outer) with traversal (inner)
    """
    try:
        resulting_kind, _ = _COMPOSITION_TABLE[outer_kind, inner_kind]
    except (KeyError, TypeError):
        raise UnsupportedCompositionError(outer_kind, inner_kind) from None
    return resulting_kind


def _compose_pair(outer, inner):
    outer_kind = kind_of(outer)
    inner_kind = kind_of(inner)
    if outer_kind is None or inner_kind is None:
        raise UnsupportedCompositionError(
            _kind_descr(outer), _kind_descr(inner), 'not an optic')
    try:
        resulting_kind, builder = _COMPOSITION_TABLE[outer_kind, inner_kind]
    except KeyError:
        raise UnsupportedCompositionError(outer_kind, inner_kind) from None
    if settings.check_declared_types:
        _verify_declared_types(outer, inner)
    composed = builder(
        outer, inner,
        source=outer.source,
        target=inner.target,
        label=_join_labels(outer, inner),
        inferred_types=(({'source'} & outer.inferred_types)
                        | ({'target'} & inner.inferred_types)))
    assert composed.kind == resulting_kind
    LOGGER.debug('composed %r with %r into %r', outer, inner, composed)
    return composed


# Note: the outer optics' setters are always given *wrapped* new values
# (`Replace(...)`), so that values which happen to be callables are not
# mistaken for updaters.

def _compose_lens_lens(outer, inner, **meta):
    def get(s):
        return inner.get(outer.get(s))

    def set(update: UpdateArg):
        def setter(s):
            new_a = inner.set(update)(outer.get(s))
            return outer.set(Replace(new_a))(s)
        return setter

    return Lens._new(get=get, set=set, **meta)


def _compose_lens_iso(outer, inner, **meta):
    def get(s):
        return inner.to(outer.get(s))

    def set(update: UpdateArg):
        upd = as_update(update)
        def setter(s):
            current = inner.to(outer.get(s)) if is_function_update(upd) else None
            new_b = apply_update(upd, current)
            return outer.set(Replace(inner.from_(new_b)))(s)
        return setter

    return Lens._new(get=get, set=set, **meta)


def _compose_iso_lens(outer, inner, **meta):
    def get(s):
        return inner.get(outer.to(s))

    def set(update: UpdateArg):
        def setter(s):
            return outer.from_(inner.set(update)(outer.to(s)))
        return setter

    return Lens._new(get=get, set=set, **meta)


def _compose_iso_iso(outer, inner, **meta):
    def to(s):
        return inner.to(outer.to(s))

    def from_(b):
        return outer.from_(inner.from_(b))

    return Iso._new(to=to, from_=from_, **meta)


def _compose_into_prism(outer, inner, **meta):
    # The general case: lens*prism, prism*lens, prism*prism, iso*prism.
    outer_get = _focus_getter(outer)
    outer_put = _focus_putter(outer)
    label = meta.get('label')

    def get(s):
        a = outer_get(s)
        if a is None:
            return None
        return inner.get(a)

    def set(update: UpdateArg):
        def setter(s):
            a = outer_get(s)
            if a is None:
                # (no matter whether `update` is a literal or a function)
                LOGGER.debug('prism %r: outer value absent, nothing set', label)
                return s
            new_a = inner.set(update)(a)
            return outer_put(new_a, s)
        return setter

    return Prism._new(get=get, set=set, **meta)


def _compose_prism_iso(outer, inner, **meta):
    label = meta.get('label')

    def get(s):
        a = outer.get(s)
        if a is None:
            return None
        return inner.to(a)

    def set(update: UpdateArg):
        upd = as_update(update)
        def setter(s):
            current = None
            if is_function_update(upd):
                a = outer.get(s)
                if a is None:
                    LOGGER.debug('prism %r: outer value absent, '
                                 'updater not applied', label)
                    return s
                current = inner.to(a)
            # (a literal is passed to the outer prism even if the outer
            # value is absent -- it is up to that prism's own setter
            # whether the branch is materialized)
            new_b = apply_update(upd, current)
            return outer.set(Replace(inner.from_(new_b)))(s)
        return setter

    return Prism._new(get=get, set=set, **meta)


_COMPOSITION_TABLE = {
    (LENS, LENS): (LENS, _compose_lens_lens),
    (LENS, PRISM): (PRISM, _compose_into_prism),
    (LENS, ISO): (LENS, _compose_lens_iso),

    (PRISM, LENS): (PRISM, _compose_into_prism),
    (PRISM, PRISM): (PRISM, _compose_into_prism),
    (PRISM, ISO): (PRISM, _compose_prism_iso),

    (ISO, LENS): (LENS, _compose_iso_lens),
    (ISO, PRISM): (PRISM, _compose_into_prism),
    (ISO, ISO): (ISO, _compose_iso_iso),
}


def _focus_getter(optic):
    if optic.kind == ISO:
        return optic.to
    return optic.get


def _focus_putter(optic):
    if optic.kind == ISO:
        return lambda new_a, s: optic.from_(new_a)
    return lambda new_a, s: optic.set(Replace(new_a))(s)


def _verify_declared_types(outer, inner):
    if 'target' in outer.inferred_types or 'source' in inner.inferred_types:
        # (types inferred from sample values are not checked)
        return
    outer_target = outer.target
    inner_source = inner.source
    if not _are_declared_types_compatible(outer_target, inner_source):
        raise IncompatibleOpticTypesError(outer_target, inner_source)


def _are_declared_types_compatible(actual, expected):
    if not (isinstance(actual, type) and isinstance(expected, type)):
        return True
    try:
        return issubclass(actual, expected)
    except TypeError:
        # (some types, e.g. `TypedDict` ones, do not support subclass checks)
        return True


def _join_labels(outer, inner):
    outer_label = _label_or_placeholder(outer)
    inner_label = _label_or_placeholder(inner)
    if inner_label.startswith('['):
        return outer_label + inner_label
    return outer_label + '.' + inner_label


def _label_or_placeholder(optic):
    if optic.label is None:
        return '<{}>'.format(optic.kind)
    return optic.label


def _key_label(key):
    if isinstance(key, int):
        return '[{}]'.format(key)
    return str(key)


def _kind_descr(obj):
    kind = kind_of(obj)
    if kind is None:
        return '{} instance'.format(type(obj).__qualname__)
    return kind


def _type_repr(t):
    if t is None:
        return '?'
    if isinstance(t, type):
        return t.__qualname__
    return repr(t)


#
# Factories bound to a given source
#

class _SourceBoundFactory:

    _required_outer_kind = None  # (must be set in concrete subclasses)

    def __init__(self, source):
        self._source = source
        self.source_type = declared_source_type(source)
        self._inferred_types = _inferred_types_for(source)

    def __repr__(self):
        return '<{} source={}>'.format(self.__class__.__qualname__,
                                       _type_repr(self.source_type))

    def compose(self, outer, inner, *more):
        """
        Like `compose()`, but `outer` must be of the kind this factory is
        dedicated to, and its declared source type (if any) must match
        the factory's source.
        """
        outer_kind = kind_of(outer)
        if outer_kind != self._required_outer_kind:
            raise UnsupportedCompositionError(
                _kind_descr(outer), _kind_descr(inner),
                'the outer optic must be a {}'.format(self._required_outer_kind))
        if (outer.source is not None
              and not self._inferred_types
              and 'source' not in outer.inferred_types
              and not _are_declared_types_compatible(self.source_type, outer.source)):
            raise IncompatibleOpticTypesError(self.source_type, outer.source)
        return compose(outer, inner, *more)


class LensFactory(_SourceBoundFactory, Generic[S]):

    """
    A factory of lenses for the given source (a type or a representative
    instance).

    >>> person = {'name': 'John', 'address': {'street': '123', 'city': 'NYC'}}
    >>> Person = LensFactory(person)
    >>> Address = LensFactory(person['address'])
    >>> city = Person.compose(Person.prop('address'), Address.prop('city'))
    >>> city.set('LA')(person)
    {'name': 'John', 'address': {'street': '123', 'city': 'LA'}}
    """

    _required_outer_kind = LENS

    def prop(self, key, *, label=None) -> Lens:
        """See: `prop()`."""
        return prop(key, self._source, label=label)

    def of(self, get, set, *, target=None, label=None) -> Lens:
        """See: `Lens`."""
        return Lens(get, set, source=self.source_type, target=target, label=label,
                    inferred_types=({'source'} & self._inferred_types))


class PrismFactory(_SourceBoundFactory, Generic[S]):

    """
    A factory of prisms for the given source (a type or a representative
    instance).

    >>> person = {'name': 'John', 'age': 30}
    >>> Person = PrismFactory(person)
    >>> address = Person.of(get=lambda p: p.get('address'),
    ...                     set=lambda a: lambda p: {**p, 'address': a})
    >>> address.get(person) is None
    True
    >>> city = Person.compose(address, PrismFactory({'city': '?'}).prop('city'))
    >>> city.get(person) is None
    True
    >>> city.set('LA')(person) is person        # (the outer branch is absent)
    True
    """

    _required_outer_kind = PRISM

    def prop(self, key, *, label=None) -> Prism:
        """See: `optional_prop()`."""
        return optional_prop(key, self._source, label=label)

    def of(self, get, set, *, target=None, label=None) -> Prism:
        """See: `Prism`."""
        return Prism(get, set, source=self.source_type, target=target, label=label,
                     inferred_types=({'source'} & self._inferred_types))


#
# Introspection helpers
#

def kind_of(obj: Any) -> Optional[str]:
    """
    Get the kind tag of the given optic (or `None` if it is not an optic).

    >>> kind_of(Iso(str, int))
    'iso'
    >>> kind_of(42) is None
    True
    """
    if isinstance(obj, Optic) and obj.kind in OPTIC_KINDS:
        return obj.kind
    return None


def source_type_of(optic: Optic) -> Any:
    """
    Get the declared source type of the given optic (`None` if undeclared).

    >>> source_type_of(Iso(str, int, source=int, target=str))
    <class 'int'>
    """
    return optic.source


def target_type_of(optic: Optic) -> Any:
    """
    Get the declared target type of the given optic (`None` if undeclared).

    >>> target_type_of(Iso(str, int, source=int, target=str))
    <class 'str'>
    """
    return optic.target
