from __future__ import annotations

__copyright__ = "Copyright (C) 2024 Densor Contributors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

# {{{ docs

__doc__ = """
.. currentmodule:: densor

Arrays
------

.. autoclass:: ArrayBase

Creation
^^^^^^^^

.. autofunction:: make_array
.. autofunction:: full
.. autofunction:: zeros
.. autofunction:: ones
.. autofunction:: arange

Elementwise Operations
^^^^^^^^^^^^^^^^^^^^^^

All of these broadcast their operands (see
:meth:`densor.shape.Shape.broadcast`) and accept any mix of
:class:`ArrayBase`, :class:`~densor.view.ArrayView` and scalars. A scalar
takes part as an array with dims ``[1]``.

.. autofunction:: add
.. autofunction:: subtract
.. autofunction:: multiply
.. autofunction:: divide
.. autofunction:: remainder
.. autofunction:: equal
.. autofunction:: not_equal
.. autofunction:: less
.. autofunction:: less_equal
.. autofunction:: greater
.. autofunction:: greater_equal
.. autofunction:: logical_and
.. autofunction:: logical_or
.. autofunction:: maximum
.. autofunction:: minimum

Linear Algebra
^^^^^^^^^^^^^^

.. autofunction:: matmul

.. currentmodule:: densor.array

Internal API
^^^^^^^^^^^^

.. autofunction:: binary_op
.. autofunction:: as_view
"""

# }}}

import operator
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any, TypeAlias

import numpy as np
from pytools import memoize_method

from densor.diagnostic import MatMulError, ShapeDataMisalignmentError
from densor.dtype import ElementKind, kind_of, normalize_dtype
from densor.shape import ShapeBase
from densor.view import ArrayView, ElementwiseOpsMixin


SCALAR_CLASSES = (bool, int, float, complex, np.generic)


# {{{ array base

class ArrayBase(ElementwiseOpsMixin):
    """
    An owning, immutable N-dimensional array.

    .. attribute:: shape

        The :class:`~densor.shape.ShapeBase` of the array.

    .. attribute:: data

        A one-dimensional, read-only :class:`numpy.ndarray` holding the
        elements in row-major order (the innermost axis varies fastest).

    Every construction path checks that ``shape.total_volume()`` equals
    ``len(data)``; nothing can change either afterwards.

    .. automethod:: new_checked
    .. automethod:: from_numpy
    .. automethod:: from_nested

    .. autoattribute:: ndims
    .. autoattribute:: dims
    .. autoattribute:: numpy_shape
    .. autoattribute:: dtype
    .. autoattribute:: kind

    .. automethod:: view
    .. automethod:: derank
    .. automethod:: slice
    .. automethod:: reshape
    .. automethod:: astype
    .. automethod:: to_numpy
    .. automethod:: tolist

    ``==`` compares arrays structurally (equal dims and equal elements);
    use :func:`densor.equal` for elementwise comparison.
    """

    shape: ShapeBase
    data: np.ndarray

    def __init__(self, shape: ShapeBase, data: np.ndarray) -> None:
        # unchecked, see new_checked
        data.setflags(write=False)
        self.shape = shape
        self.data = data

    @classmethod
    def _from_raw_parts(cls, shape: ShapeBase, data: np.ndarray) -> ArrayBase:
        assert len(data) == shape.total_volume()
        return cls(shape, data)

    @classmethod
    def new_checked(cls, dims: Iterable[int], data: Iterable[Any],
                    dtype: Any = None) -> ArrayBase:
        """
        :arg dims: axis lengths, innermost first.
        :arg data: the elements in row-major order. They are copied.
        :arg dtype: optional element type of the new array.

        :raises densor.diagnostic.ShapeZeroDimsError: if *dims* is empty.
        :raises densor.diagnostic.ShapeZeroLenDimError: if an axis has
            length 0.
        :raises densor.diagnostic.ShapeDataMisalignmentError: if the number
            of elements in *data* differs from the volume of *dims*.
        """
        shape = ShapeBase.new_checked(dims)

        if not isinstance(data, (np.ndarray, Sequence)):
            data = list(data)

        data = np.array(data, dtype=normalize_dtype(dtype))
        if data.ndim != 1:
            raise ValueError("data must be a flat sequence of elements "
                             f"(got {data.ndim} dimensions)")

        if shape.total_volume() != len(data):
            raise ShapeDataMisalignmentError(shape.total_volume(), len(data))

        return cls(shape, data)

    @classmethod
    def from_numpy(cls, ary: Any, dtype: Any = None) -> ArrayBase:
        """
        Returns an array with the contents of the :class:`numpy.ndarray`
        *ary*. A zero-dimensional *ary* yields dims ``[1]``.
        """
        ary = np.asarray(ary, dtype=normalize_dtype(dtype))
        if ary.ndim == 0:
            ary = ary.reshape(1)

        return cls.new_checked(ary.shape[::-1], ary.reshape(-1))

    @classmethod
    def from_nested(cls, seq: Any, dtype: Any = None) -> ArrayBase:
        """
        Returns an array from nested sequences, outermost level first, as
        accepted by :func:`numpy.array`.

        :raises ValueError: if the nesting is ragged.
        """
        return cls.from_numpy(np.array(seq, dtype=normalize_dtype(dtype)))

    # {{{ attributes

    @property
    def ndims(self) -> int:
        return self.shape.ndims

    @property
    def dims(self) -> tuple[int, ...]:
        """Axis lengths, innermost first."""
        return self.shape.dims

    @property
    def numpy_shape(self) -> tuple[int, ...]:
        """Axis lengths, outermost first, as in :attr:`numpy.ndarray.shape`."""
        return self.shape.dims[::-1]

    @property
    def dtype(self) -> np.dtype[Any]:
        return self.data.dtype

    @property
    def kind(self) -> ElementKind:
        """
        The :class:`~densor.dtype.ElementKind` of the elements.

        :raises TypeError: if the element type is not one of the supported
            kinds.
        """
        return kind_of(self.data.dtype)

    def __len__(self) -> int:
        return self.shape.dims[-1]

    # }}}

    # {{{ views

    def view(self) -> ArrayView:
        """Returns an :class:`~densor.view.ArrayView` of the whole array."""
        return ArrayView.from_base(self)

    def derank(self, index: int) -> ArrayView:
        """Equivalent to ``self.view().derank(index)``."""
        return self.view().derank(index)

    def slice(self, start: int, stop: int) -> ArrayView:
        """Equivalent to ``self.view().slice(start, stop)``."""
        return self.view().slice(start, stop)

    def __getitem__(self, key: int | slice) -> Any:
        return self.view()[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.view())

    # }}}

    # {{{ conversion

    def reshape(self, dims: Iterable[int]) -> ArrayBase:
        """
        Returns an array with the same elements and innermost-first
        dims *dims*.

        :raises densor.diagnostic.ShapeDataMisalignmentError: if the volume
            of *dims* differs from the number of elements.
        """
        shape = ShapeBase.new_checked(dims)
        if shape.total_volume() != len(self.data):
            raise ShapeDataMisalignmentError(shape.total_volume(),
                                             len(self.data))

        # both arrays are immutable, so they may share the buffer
        return ArrayBase(shape, self.data)

    def astype(self, dtype: Any, casting: str = "unsafe") -> ArrayBase:
        """
        Returns a copy of *self* with elements converted to *dtype*, which
        may be an :class:`~densor.dtype.ElementKind` or anything
        :class:`numpy.dtype` accepts. *casting* is passed to
        :meth:`numpy.ndarray.astype`.
        """
        return ArrayBase(self.shape,
                         self.data.astype(normalize_dtype(dtype),
                                          casting=casting))

    def to_numpy(self) -> np.ndarray:
        """Returns a writable :class:`numpy.ndarray` copy of *self*."""
        return self.data.reshape(self.numpy_shape).copy()

    def tolist(self) -> Any:
        """Returns the elements as nested lists, outermost axis first."""
        return self.to_numpy().tolist()

    # }}}

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ArrayBase):
            return False
        return (self.shape == other.shape
                and bool(np.array_equal(self.data, other.data)))

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    @memoize_method
    def __repr__(self) -> str:
        return (f"ArrayBase(dims={list(self.dims)}, "
                f"data={self.data.tolist()!r}, dtype='{self.dtype}')")

    def __reduce__(self) -> tuple[Any, ...]:
        return (ArrayBase.new_checked, (self.dims, self.data, self.dtype))


ArrayOrView: TypeAlias = ArrayBase | ArrayView
ArrayOrScalar: TypeAlias = ArrayBase | ArrayView | bool | int | float | complex \
        | np.generic

# }}}


# {{{ creation

def make_array(dims: Iterable[int], data: Iterable[Any],
               dtype: Any = None) -> ArrayBase:
    """Equivalent to :meth:`ArrayBase.new_checked`."""
    return ArrayBase.new_checked(dims, data, dtype=dtype)


def full(dims: Iterable[int], fill_value: Any, dtype: Any = None) -> ArrayBase:
    """
    Returns an array with innermost-first dims *dims* with every element
    equal to *fill_value*.
    """
    shape = ShapeBase.new_checked(dims)
    data = np.full(shape.total_volume(), fill_value,
                   dtype=normalize_dtype(dtype))
    return ArrayBase(shape, data)


def zeros(dims: Iterable[int], dtype: Any = float) -> ArrayBase:
    return full(dims, 0, dtype=dtype)


def ones(dims: Iterable[int], dtype: Any = float) -> ArrayBase:
    return full(dims, 1, dtype=dtype)


def arange(dims: Iterable[int], dtype: Any = None) -> ArrayBase:
    """
    Returns an array with innermost-first dims *dims* whose elements are
    ``0, 1, 2, ...`` in row-major order.
    """
    shape = ShapeBase.new_checked(dims)
    return ArrayBase(shape, np.arange(shape.total_volume(),
                                      dtype=normalize_dtype(dtype)))

# }}}


# {{{ elementwise operations

def as_view(ary_or_scalar: ArrayOrScalar) -> ArrayView:
    """
    Returns an :class:`~densor.view.ArrayView` for *ary_or_scalar*. Scalars
    are wrapped as arrays with dims ``[1]``. A Python scalar is stored with the
    :mod:`numpy` type :func:`numpy.array` gives it, e.g. the default integer
    type for an :class:`int`.
    """
    if isinstance(ary_or_scalar, ArrayView):
        return ary_or_scalar
    elif isinstance(ary_or_scalar, ArrayBase):
        return ary_or_scalar.view()
    elif isinstance(ary_or_scalar, SCALAR_CLASSES):
        return ArrayBase.new_checked([1], [ary_or_scalar]).view()
    else:
        raise TypeError("expected an array, a view or a scalar, got "
                        f"'{type(ary_or_scalar).__name__}'")


def binary_op(x1: ArrayOrScalar, x2: ArrayOrScalar,
              op: Callable[[Any, Any], Any], dtype: Any = None) -> ArrayBase:
    """
    Broadcasts *x1* against *x2* and applies *op* elementwise. See
    :func:`densor.traversal.broadcast_combine`.
    """
    from densor.traversal import broadcast_combine
    return broadcast_combine(as_view(x1), as_view(x2), op,
                             dtype=normalize_dtype(dtype))


def add(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 + x2`` elementwise."""
    return binary_op(x1, x2, operator.add)


def subtract(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 - x2`` elementwise."""
    return binary_op(x1, x2, operator.sub)


def multiply(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 * x2`` elementwise."""
    return binary_op(x1, x2, operator.mul)


def divide(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 / x2`` elementwise."""
    return binary_op(x1, x2, operator.truediv)


def remainder(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 % x2`` elementwise."""
    return binary_op(x1, x2, operator.mod)


# {{{ comparison operator

def _compare(x1: ArrayOrScalar, x2: ArrayOrScalar, which: str) -> ArrayBase:
    return binary_op(x1, x2, getattr(operator, which), dtype=np.bool_)


def equal(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 == x2`` elementwise, as a boolean array."""
    return _compare(x1, x2, "eq")


def not_equal(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 != x2`` elementwise, as a boolean array."""
    return _compare(x1, x2, "ne")


def less(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 < x2`` elementwise, as a boolean array."""
    return _compare(x1, x2, "lt")


def less_equal(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 <= x2`` elementwise, as a boolean array."""
    return _compare(x1, x2, "le")


def greater(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 > x2`` elementwise, as a boolean array."""
    return _compare(x1, x2, "gt")


def greater_equal(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns ``x1 >= x2`` elementwise, as a boolean array."""
    return _compare(x1, x2, "ge")

# }}}


# {{{ logical operations

def logical_and(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns the elementwise logical-and of *x1* and *x2*."""
    return binary_op(x1, x2, lambda a, b: bool(a) and bool(b),
                     dtype=np.bool_)


def logical_or(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """Returns the elementwise logical-or of *x1* and *x2*."""
    return binary_op(x1, x2, lambda a, b: bool(a) or bool(b),
                     dtype=np.bool_)

# }}}


# {{{ (max|min)inimum

def maximum(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """
    Returns the elementwise maximum of *x1* and *x2*. NaNs propagate, as in
    :func:`numpy.maximum`.
    """
    return binary_op(x1, x2, np.maximum)


def minimum(x1: ArrayOrScalar, x2: ArrayOrScalar) -> ArrayBase:
    """
    Returns the elementwise minimum of *x1* and *x2*. NaNs propagate, as in
    :func:`numpy.minimum`.
    """
    return binary_op(x1, x2, np.minimum)

# }}}

# }}}


# {{{ matmul

def matmul(x1: ArrayOrView, x2: ArrayOrView) -> ArrayBase:
    """
    Matrix product of two arrays with one or two axes each, following the
    axis conventions of :func:`numpy.matmul` (a matrix with
    ``numpy_shape == (m, k)`` has *m* rows of length *k*). A vector-vector
    product is returned with dims ``[1]``.

    :raises densor.diagnostic.MatMulError: if the contracted lengths differ.
    :raises ValueError: if an operand has more than two axes.
    """
    a, b = as_view(x1), as_view(x2)
    if a.ndims > 2 or b.ndims > 2:
        raise ValueError("matmul supports operands with at most 2 axes "
                         f"(got {a.ndims} and {b.ndims})")

    # contracted length: a's innermost axis, b's outermost axis
    len_a = a.dims[0]
    len_b = len(b)
    if len_a != len_b:
        raise MatMulError(len_a, len_b)

    if b.ndims == 1:
        columns = [b.data]
    else:
        ncols = b.dims[0]
        columns = [b.data[j::ncols] for j in range(ncols)]

    rows = [a.data] if a.ndims == 1 else [row.data for row in a.iter_subviews()]

    data = np.array([np.dot(row, col) for row in rows for col in columns])

    dims = []
    if b.ndims == 2:
        dims.append(len(columns))
    if a.ndims == 2:
        dims.append(len(rows))
    if not dims:
        dims.append(1)

    return ArrayBase(ShapeBase(dims), data)

# }}}

# vim: fdm=marker
