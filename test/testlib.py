from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

import densor as dn
from densor.array import ArrayBase


# {{{ random broadcast-compatible shapes

class RandomShapeContext:
    def __init__(self, rng: np.random.Generator, max_ndims: int = 4,
                 max_axis_len: int = 4) -> None:
        self.rng = rng
        self.max_ndims = max_ndims
        self.max_axis_len = max_axis_len


def make_random_dims(rsc: RandomShapeContext) -> tuple[int, ...]:
    """Returns innermost-first dims of random rank and axis lengths."""
    rng = rsc.rng
    ndims = int(rng.integers(1, rsc.max_ndims + 1))
    return tuple(int(d) for d in rng.integers(1, rsc.max_axis_len + 1,
                                              size=ndims))


def make_random_broadcast_pair(rsc: RandomShapeContext
                               ) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """
    Returns two innermost-first dims tuples that broadcast against each
    other. Each one keeps a prefix (the inner axes) of a common output shape,
    with some axes collapsed to length 1.
    """
    rng = rsc.rng
    out_dims = make_random_dims(rsc)

    def derive() -> tuple[int, ...]:
        ndims = int(rng.integers(1, len(out_dims) + 1))
        return tuple(1 if rng.integers(0, 3) == 0 else d
                     for d in out_dims[:ndims])

    return derive(), derive()


def make_random_array(rsc: RandomShapeContext,
                      dims: Sequence[int]) -> ArrayBase:
    volume = int(np.prod(dims))
    # nonzero, so that division is well-defined
    return dn.make_array(dims, rsc.rng.integers(1, 10, size=volume))

# }}}


# {{{ tools for comparison to numpy

_BINOPS: list[tuple[Callable[[Any, Any], Any], Callable[[Any, Any], Any]]] = [
        (operator.add, operator.add),
        (operator.sub, operator.sub),
        (operator.mul, operator.mul),
        (operator.truediv, operator.truediv),
        (operator.mod, operator.mod),
        (dn.maximum, np.maximum),
        (dn.minimum, np.minimum),
        (dn.less, np.less),
        (dn.equal, np.equal),
        ]


def assert_matches_numpy(a: ArrayBase, b: ArrayBase,
                         dn_op: Callable[[Any, Any], Any],
                         np_op: Callable[[Any, Any], Any]) -> None:
    """
    Raises an :class:`AssertionError` if applying *dn_op* to *a* and *b*
    disagrees in shape or values with applying *np_op* to their
    :mod:`numpy` counterparts.
    """
    result = dn_op(a, b)
    ref = np_op(a.to_numpy(), b.to_numpy())

    assert result.numpy_shape == ref.shape, (result.dims, ref.shape)
    if ref.dtype == np.bool_:
        np.testing.assert_array_equal(result.to_numpy(), ref)
    else:
        np.testing.assert_allclose(result.to_numpy(), ref)

# }}}

# vim: fdm=marker
