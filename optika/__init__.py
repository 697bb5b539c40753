# Copyright (c) 2025 NASK. All rights reserved.

"""
*optika* -- composable lenses, prisms and isos for immutable nested data.

.. note::

   For basic information how to use the optics -- please consult the
   documentation of the :mod:`optika.optics` module.
"""

from optika.exceptions import (
    OpticError,
    UnknownFieldError,
    UnsupportedSourceError,
    UnsupportedCompositionError,
    IncompatibleOpticTypesError,
    ConfigError,
)
from optika.optics import (
    LENS,
    PRISM,
    ISO,
    OPTIC_KINDS,

    Optic,
    Lens,
    Prism,
    Iso,

    lens,
    prism_of,
    iso,
    prop,
    optional_prop,

    compose,
    composed_kind,

    LensFactory,
    PrismFactory,

    kind_of,
    source_type_of,
    target_type_of,
)
from optika.updaters import (
    Replace,
    Update,
    UpdateArg,
    as_update,
    apply_update,
    is_function_update,
)


__all__ = [
    'OpticError',
    'UnknownFieldError',
    'UnsupportedSourceError',
    'UnsupportedCompositionError',
    'IncompatibleOpticTypesError',
    'ConfigError',

    'LENS',
    'PRISM',
    'ISO',
    'OPTIC_KINDS',

    'Optic',
    'Lens',
    'Prism',
    'Iso',

    'lens',
    'prism_of',
    'iso',
    'prop',
    'optional_prop',

    'compose',
    'composed_kind',

    'LensFactory',
    'PrismFactory',

    'kind_of',
    'source_type_of',
    'target_type_of',

    'Replace',
    'Update',
    'UpdateArg',
    'as_update',
    'apply_update',
    'is_function_update',
]
