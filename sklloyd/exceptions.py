"""Exceptions raised by :mod:`sklloyd`."""

from sklearn.utils._param_validation import InvalidParameterError

__all__ = ["InvalidConfigurationError", "DegenerateInputError"]


class InvalidConfigurationError(InvalidParameterError):
    """Raised when the clustering configuration cannot be used.

    Covers invalid estimator parameters (including an unrecognized ``init``),
    a requested number of clusters larger than the number of samples and
    manually supplied centers of the wrong shape. Inherits from
    :class:`ValueError` and :class:`TypeError` through scikit-learn's
    ``InvalidParameterError``.
    """


class DegenerateInputError(ValueError):
    """Raised when weighted sampling receives weights it cannot normalise.

    This happens when every weight is zero, e.g. during k-means++ seeding
    when all samples already coincide with a chosen center.
    """
