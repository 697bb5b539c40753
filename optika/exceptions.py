# Copyright (c) 2025 NASK. All rights reserved.

"""
Exceptions raised by the *optika* machinery.

Note that nothing here is raised when a focused value is merely absent
(a prism's `get()` then returns `None`, and a function-based `set()`
is a no-op) -- the exceptions defined below signal *misuse* (detected
as early as possible, i.e., when an optic is being constructed or
composed), not conditions the caller is expected to recover from.
"""


class OpticError(Exception):

    """
    The base class of *optika*-specific exceptions.

    >>> print(OpticError('Some Message'))
    [optic-related error] Some Message

    >>> print(OpticError('Some arg', 42, 'Yet another arg'))
    [optic-related error] ('Some arg', 42, 'Yet another arg')
    """

    def __str__(self):
        return '[optic-related error] ' + super().__str__()



_KeyError_str = getattr(KeyError.__str__, '__func__', KeyError.__str__)

class _KeyErrorSubclassMixin(KeyError):  # a non-public helper

    def __str__(self):
        # We want to skip the `KeyError`'s implementation of `__str__()`
        # -- which applies `repr()` to the sole constructor argument --
        # so here we jump over it in the MRO of the exception class.
        method = super().__str__
        if getattr(method, '__objclass__', None) is KeyError or (
              _KeyError_str is not None and
              _KeyError_str is getattr(method, '__func__', None)):
            method = super(KeyError, self).__str__
        return method()



class UnknownFieldError(_KeyErrorSubclassMixin, OpticError):

    """
    Raised when an optic is requested for a field that does not exist
    on the given source (type or representative instance).

    >>> exc = UnknownFieldError('nmae', source='Person')
    >>> print(exc)
    [optic-related error] unknown field 'nmae' (source: 'Person')
    >>> exc.key
    'nmae'
    >>> exc.source
    'Person'
    >>> isinstance(exc, KeyError) and isinstance(exc, OpticError)
    True
    """

    def __init__(self, key, *, source):
        self.key = key
        self.source = source
        super().__init__('unknown field {!r} (source: {!r})'.format(key, source))


class UnsupportedSourceError(OpticError, TypeError):

    """
    Raised when the fields of a source cannot be determined (so that
    keys cannot be validated), or when a value cannot be shallow-copied
    with one of its fields replaced.

    >>> exc = UnsupportedSourceError(dict, 'no declared fields')
    >>> print(exc)
    [optic-related error] unsupported source <class 'dict'>: no declared fields
    >>> exc.source is dict
    True
    """

    def __init__(self, source, reason):
        self.source = source
        super().__init__('unsupported source {!r}: {}'.format(source, reason))


class UnsupportedCompositionError(OpticError, TypeError):

    """
    Raised when two operands cannot be composed (e.g., one of them is
    not an optic, or an optic of some kind is given where an optic of
    another kind is required).

    >>> exc = UnsupportedCompositionError('iso', 'lens', 'outer must be a prism')
    >>> print(exc)
    [optic-related error] cannot compose iso (outer) with lens (inner): outer must be a prism
    >>> exc.outer_kind, exc.inner_kind
    ('iso', 'lens')
    """

    def __init__(self, outer_kind, inner_kind, reason=None):
        self.outer_kind = outer_kind
        self.inner_kind = inner_kind
        msg = 'cannot compose {} (outer) with {} (inner)'.format(outer_kind, inner_kind)
        if reason:
            msg += ': ' + reason
        super().__init__(msg)


class IncompatibleOpticTypesError(OpticError, TypeError):

    """
    Raised when the declared target type of the outer optic does not
    match the declared source type of the inner one.

    >>> exc = IncompatibleOpticTypesError(int, str)
    >>> print(exc)  # doctest: +NORMALIZE_WHITESPACE
    [optic-related error] the outer optic's target type (<class 'int'>)
        is not compatible with the inner optic's source type (<class 'str'>)
    >>> exc.outer_target is int and exc.inner_source is str
    True
    """

    def __init__(self, outer_target, inner_source):
        self.outer_target = outer_target
        self.inner_source = inner_source
        super().__init__(
            "the outer optic's target type ({!r}) is not compatible "
            "with the inner optic's source type ({!r})".format(outer_target, inner_source))


class ConfigError(OpticError):
    """Raised when *optika*'s settings cannot be parsed or overridden."""
