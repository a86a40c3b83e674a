"""
Exceptions raised while building and assembling passes.

Schema violations (wrong type or shape of a single value) are reported with
the builtin TypeError at the setter. The classes below cover the remaining
failure families.
"""


class WalletPassError(Exception):
    """Base class for every pass building error."""


class PassStyleError(WalletPassError, ReferenceError):
    """A style-scoped field was accessed while a different (or no) style is active."""


class InconsistentFieldsError(WalletPassError, ReferenceError):
    """Two options that must be given together were not."""


class PassValidationError(WalletPassError, ValueError):
    """The pass is missing data required to produce a bundle."""


class PassSigningError(WalletPassError, ReferenceError):
    """Certificate or private key needed for signing are not set."""
