# Copyright (c) 2025 NASK. All rights reserved.

"""
Normalization of the *update* argument accepted by every optic's `set()`.

An *update* is one of:

* a `Replace` instance -- the wrapped value replaces the current one;
* an `Update` instance -- the wrapped function is applied to the
  current value, its result replaces it;
* any callable -- treated as if wrapped in `Update`;
* any other object -- treated as if wrapped in `Replace`.

The explicit wrappers exist because the plain "is it callable?" check
is ambiguous whenever the focused value itself may be a callable (to
store a function as the new value, wrap it in `Replace`).
"""

from collections.abc import Callable
from typing import (
    Any,
    Generic,
    TypeVar,
    Union,
)


A = TypeVar('A')


class Replace(Generic[A]):

    """
    An explicit *literal replacement* update.

    >>> Replace(42)
    Replace(42)
    >>> Replace(42) == Replace(42)
    True
    >>> Replace(len).value is len
    True
    """

    __slots__ = ('value',)

    def __init__(self, value: A):
        object.__setattr__(self, 'value', value)

    def __setattr__(self, name, value):
        raise AttributeError('{} instances are immutable'.format(self.__class__.__qualname__))

    def __eq__(self, other):
        if isinstance(other, Replace):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((Replace, self.value))

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__qualname__, self.value)


class Update(Generic[A]):

    """
    An explicit *function* update (an *updater*).

    >>> upd = Update(str.upper)
    >>> upd.func('spam')
    'SPAM'
    >>> Update('not callable')
    Traceback (most recent call last):
      ...
    TypeError: Update() requires a callable, got 'not callable'
    """

    __slots__ = ('func',)

    def __init__(self, func: Callable[[A], A]):
        if not callable(func):
            raise TypeError('Update() requires a callable, got {!r}'.format(func))
        object.__setattr__(self, 'func', func)

    def __setattr__(self, name, value):
        raise AttributeError('{} instances are immutable'.format(self.__class__.__qualname__))

    def __eq__(self, other):
        if isinstance(other, Update):
            return self.func == other.func
        return NotImplemented

    def __hash__(self):
        return hash((Update, self.func))

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__qualname__, self.func)


UpdateArg = Union[Replace[A], Update[A], Callable[[A], A], A]


def as_update(update: Any) -> Union[Replace, Update]:
    """
    Normalize the given *update* to a `Replace` or `Update` instance.

    >>> as_update(42)
    Replace(42)
    >>> as_update(None)
    Replace(None)
    >>> as_update(str.upper)
    Update(<method 'upper' of 'str' objects>)
    >>> u = Update(abs)
    >>> as_update(u) is u
    True
    >>> as_update(Replace(abs))
    Replace(<built-in function abs>)
    """
    if isinstance(update, (Replace, Update)):
        return update
    if callable(update):
        return Update(update)
    return Replace(update)


def is_function_update(update: Any) -> bool:
    """
    Tell whether the given *update* needs the current value.

    >>> is_function_update(lambda x: x)
    True
    >>> is_function_update(Update(abs))
    True
    >>> is_function_update(Replace(abs))
    False
    >>> is_function_update('literal')
    False
    """
    return isinstance(as_update(update), Update)


def apply_update(update: Any, current: Any) -> Any:
    """
    Get the value that is to replace `current`.

    >>> apply_update('Jane', 'John')
    'Jane'
    >>> apply_update(str.upper, 'John')
    'JOHN'
    >>> apply_update(Replace(str.upper), 'John') is str.upper
    True
    """
    upd = as_update(update)
    if isinstance(upd, Update):
        return upd.func(current)
    return upd.value
