# Copyright (c) 2025 NASK. All rights reserved.

"""
Process-wide *optika* settings.

The settings are read from environment variables when this module is
imported (see `SETTING_SPECS`), and then kept in the `settings` object.
They are consulted only when optics are being constructed or composed
-- never by the `get()`/`set()`/`to()`/`from_()` operations of ready
optics.
"""

import contextlib
import os
import threading
from collections.abc import (
    Callable,
    Mapping,
)
from typing import (
    Any,
    Final,
    NamedTuple,
)

from optika.exceptions import ConfigError
from optika.log_helpers import get_logger


LOGGER = get_logger(__name__)


def str_to_bool(s):
    """
    Return True or False, given one of the known strings (see examples below).

    >>> str_to_bool('1')
    True
    >>> str_to_bool('yes')
    True
    >>> str_to_bool('On')  # note: checks are case-insensitive
    True

    >>> str_to_bool('0')
    False
    >>> str_to_bool('nO')
    False
    >>> str_to_bool('off')
    False

    Other string values cause ValueError:

    >>> str_to_bool('unknown')        # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    ValueError: ...

    Non-str values cause TypeError:

    >>> str_to_bool(True)             # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    TypeError: ...
    """
    if not isinstance(s, str):
        raise TypeError('{!a} is not a str'.format(s))
    try:
        return str_to_bool.LOWERCASE_TO_BOOL[s.lower()]
    except KeyError:
        raise ValueError(str_to_bool.MESSAGE_PATTERN.format(s)) from None

str_to_bool.LOWERCASE_TO_BOOL = {
    '1': True,
    'y': True,
    'yes': True,
    't': True,
    'true': True,
    'on': True,

    '0': False,
    'n': False,
    'no': False,
    'f': False,
    'false': False,
    'off': False,
}

str_to_bool.MESSAGE_PATTERN = (
    '{!a} is not a valid YES/NO flag (expected one of: %s; or a '
    'variant of any of them with some letters upper-cased)' % (
        ', '.join('"{}"'.format(k) for k, v in sorted(
            str_to_bool.LOWERCASE_TO_BOOL.items(),
            key=lambda item: (item[1], item[0])))))


BASIC_CONVERTERS: Final[Mapping[str, Callable[[str], Any]]] = {
    'str': str,
    'bool': str_to_bool,
    'int': int,
}


class SettingSpec(NamedTuple):
    env_var: str
    converter_spec: str
    default: Any


SETTING_SPECS: Final[Mapping[str, SettingSpec]] = {
    # Whether `compose()` shall check that the declared target type of
    # the outer optic is compatible with the declared source type of
    # the inner one (only plain classes are checked).
    'check_declared_types': SettingSpec(
        env_var='OPTIKA_CHECK_DECLARED_TYPES',
        converter_spec='bool',
        default=True,
    ),
}


class Settings:

    """
    A read-mostly namespace of the *optika* settings.

    >>> s = Settings.from_environ({'OPTIKA_CHECK_DECLARED_TYPES': 'no'})
    >>> s.check_declared_types
    False
    >>> Settings.from_environ({}).check_declared_types
    True
    >>> Settings.from_environ({'OPTIKA_CHECK_DECLARED_TYPES': 'maybe'})  # doctest: +ELLIPSIS
    Traceback (most recent call last):
      ...
    optika.exceptions.ConfigError: [optic-related error] cannot parse the value of ...
    """

    def __init__(self, **values):
        illegal = values.keys() - SETTING_SPECS.keys()
        if illegal:
            raise ConfigError('illegal setting names: {}'.format(
                ', '.join(sorted(map(repr, illegal)))))
        for name, spec in SETTING_SPECS.items():
            setattr(self, name, values.get(name, spec.default))

    def __repr__(self):
        return '<{} {}>'.format(
            self.__class__.__qualname__,
            ', '.join('{}={!r}'.format(name, getattr(self, name))
                      for name in SETTING_SPECS))

    @classmethod
    def from_environ(cls, environ=None):
        if environ is None:
            environ = os.environ
        values = {}
        for name, spec in SETTING_SPECS.items():
            raw = environ.get(spec.env_var)
            if raw is None:
                continue
            converter = BASIC_CONVERTERS[spec.converter_spec]
            try:
                values[name] = converter(raw.strip())
            except (TypeError, ValueError) as exc:
                raise ConfigError(
                    'cannot parse the value of the environment variable '
                    '{} ({!a}) as {}: {}'.format(
                        spec.env_var, raw, spec.converter_spec, exc)) from exc
        return cls(**values)


settings = Settings.from_environ()

_overriding_lock = threading.RLock()


@contextlib.contextmanager
def settings_overridden(**values):
    """
    Temporarily override some *optika* settings (mainly, for tests).

    >>> settings.check_declared_types
    True
    >>> with settings_overridden(check_declared_types=False):
    ...     settings.check_declared_types
    False
    >>> settings.check_declared_types
    True

    >>> with settings_overridden(no_such_setting=42):   # doctest: +ELLIPSIS
    ...     pass
    Traceback (most recent call last):
      ...
    optika.exceptions.ConfigError: [optic-related error] illegal setting names: 'no_such_setting'
    """
    illegal = values.keys() - SETTING_SPECS.keys()
    if illegal:
        raise ConfigError('illegal setting names: {}'.format(
            ', '.join(sorted(map(repr, illegal)))))
    with _overriding_lock:
        saved = {name: getattr(settings, name) for name in values}
        LOGGER.debug('overriding settings: %r', values)
        for name, value in values.items():
            setattr(settings, name, value)
        try:
            yield settings
        finally:
            for name, value in saved.items():
                setattr(settings, name, value)
