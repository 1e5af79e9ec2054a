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

__doc__ = """
Dense Views
-----------

.. autoclass:: ArrayView

.. autofunction:: iter_chunks
"""

import operator
from collections.abc import Callable, Iterator
from functools import partialmethod
from typing import TYPE_CHECKING, Any

import numpy as np

from densor.diagnostic import (
    Derank1DError,
    DerankIndexOutOfBoundsError,
    ReadNDimError,
)
from densor.shape import Shape


if TYPE_CHECKING:
    from densor.array import ArrayBase
    from densor.dtype import ElementKind


def iter_chunks(data: np.ndarray, stride: int) -> Iterator[np.ndarray]:
    """
    Iterates over consecutive, non-overlapping views of *stride* elements of
    the flat buffer *data*. ``len(data)`` must be a multiple of *stride*.
    This is the stepping primitive of :mod:`densor.traversal`;
    :meth:`ArrayView.iter_subviews` builds on it.
    """
    for start in range(0, len(data), stride):
        yield data[start:start + stride]


# {{{ elementwise operator mixin

class ElementwiseOpsMixin:
    """
    Arithmetic operator overloads shared by :class:`ArrayView` and
    :class:`densor.array.ArrayBase`. Every operator broadcasts its operands
    and returns a fresh :class:`densor.array.ArrayBase`.

    A scalar operand takes part as an array with dims ``[1]`` of the
    :mod:`numpy` type it converts to, so the result type follows the usual
    promotion of that type with the other operand. For instance,
    ``arange([3], dtype=np.int8) + 1`` has numpy's default integer type
    (``int64`` on most platforms), whereas :mod:`numpy` would keep ``int8``. Convert the scalar first, e.g.
    ``np.int8(1)``, to keep a narrow type.
    """

    # disallow numpy arithmetic from taking precedence
    __array_priority__ = 1
    __array_ufunc__ = None

    def _binary_op(self, op: Callable[[Any, Any], Any], other: Any,
                   reverse: bool = False) -> ArrayBase:
        from densor.array import SCALAR_CLASSES, ArrayBase

        if not isinstance(other, (ArrayBase, ArrayView, *SCALAR_CLASSES)):
            return NotImplemented

        from densor.array import binary_op
        if reverse:
            return binary_op(other, self, op)  # type: ignore[arg-type]
        else:
            return binary_op(self, other, op)  # type: ignore[arg-type]

    __add__ = partialmethod(_binary_op, operator.add)
    __radd__ = partialmethod(_binary_op, operator.add, reverse=True)

    __sub__ = partialmethod(_binary_op, operator.sub)
    __rsub__ = partialmethod(_binary_op, operator.sub, reverse=True)

    __mul__ = partialmethod(_binary_op, operator.mul)
    __rmul__ = partialmethod(_binary_op, operator.mul, reverse=True)

    __truediv__ = partialmethod(_binary_op, operator.truediv)
    __rtruediv__ = partialmethod(_binary_op, operator.truediv, reverse=True)

    __floordiv__ = partialmethod(_binary_op, operator.floordiv)
    __rfloordiv__ = partialmethod(_binary_op, operator.floordiv, reverse=True)

    __mod__ = partialmethod(_binary_op, operator.mod)
    __rmod__ = partialmethod(_binary_op, operator.mod, reverse=True)

    __pow__ = partialmethod(_binary_op, operator.pow)
    __rpow__ = partialmethod(_binary_op, operator.pow, reverse=True)

    __and__ = partialmethod(_binary_op, operator.and_)
    __rand__ = partialmethod(_binary_op, operator.and_, reverse=True)
    __or__ = partialmethod(_binary_op, operator.or_)
    __ror__ = partialmethod(_binary_op, operator.or_, reverse=True)
    __xor__ = partialmethod(_binary_op, operator.xor)
    __rxor__ = partialmethod(_binary_op, operator.xor, reverse=True)

    def __matmul__(self, other: Any, reverse: bool = False) -> ArrayBase:
        from densor.array import matmul
        first, second = (other, self) if reverse else (self, other)
        return matmul(first, second)

    __rmatmul__ = partialmethod(__matmul__, reverse=True)

    def __bool__(self) -> bool:
        raise ValueError("The truth value of an array is ambiguous.")

# }}}


# {{{ array view

class ArrayView(ElementwiseOpsMixin):
    """
    A read-only window onto a contiguous run of an array's elements.

    Views are cheap: :meth:`derank` and :meth:`slice` take :math:`O(1)` time
    and share the element buffer of the array they were created from.

    .. attribute:: shape

        The :class:`~densor.shape.Shape` of the view.

    .. attribute:: data

        A one-dimensional, read-only :class:`numpy.ndarray` holding exactly
        ``shape.volume`` elements in row-major order.

    .. autoattribute:: ndims
    .. autoattribute:: dims
    .. autoattribute:: numpy_shape
    .. autoattribute:: dtype

    .. automethod:: from_base
    .. automethod:: at_checked
    .. automethod:: derank
    .. automethod:: slice
    .. automethod:: one_subview
    .. automethod:: iter_subviews
    .. automethod:: broadcast_combine
    .. automethod:: into_base
    """

    __slots__ = ("shape", "data")

    shape: Shape
    data: np.ndarray

    def __init__(self, shape: Shape, data: np.ndarray) -> None:
        if __debug__:
            assert data.ndim == 1
            assert len(data) == shape.volume, (len(data), shape)

        self.shape = shape
        self.data = data

    @classmethod
    def from_base(cls, base: ArrayBase) -> ArrayView:
        """Returns a view spanning all of *base*."""
        return cls(base.shape.view(), base.data)

    # {{{ attributes

    @property
    def ndims(self) -> int:
        return self.shape.ndims

    def __len__(self) -> int:
        return self.shape.len

    @property
    def dims(self) -> tuple[int, ...]:
        """Axis lengths, innermost first."""
        return self.shape.to_dims()

    @property
    def numpy_shape(self) -> tuple[int, ...]:
        """Axis lengths, outermost first, as in :attr:`numpy.ndarray.shape`."""
        return self.shape.to_dims()[::-1]

    @property
    def dtype(self) -> np.dtype[Any]:
        return self.data.dtype

    @property
    def kind(self) -> ElementKind:
        from densor.dtype import kind_of
        return kind_of(self.data.dtype)

    # }}}

    # {{{ navigation

    def at(self, index: int) -> Any:
        # unchecked: callers guarantee ndims == 1 and 0 <= index < len
        return self.data[index]

    def at_checked(self, index: int) -> Any:
        """
        Returns the element at *index* of a one-dimensional view.

        :raises ReadNDimError: if the view has more than one axis.
        :raises DerankIndexOutOfBoundsError: if *index* is out of range.
        """
        if self.ndims > 1:
            raise ReadNDimError(self.ndims)
        if not 0 <= index < len(self):
            raise DerankIndexOutOfBoundsError(len(self), index)

        return self.at(index)

    def derank(self, index: int) -> ArrayView:
        """
        Returns the sub-view at position *index* of the outermost axis. The
        result has one axis less than *self*.

        :raises Derank1DError: if *self* has a single axis; use
            :meth:`at_checked` to read elements of one-dimensional views.
        :raises DerankIndexOutOfBoundsError: if *index* is out of range.
        """
        shape = self.shape.derank_checked(index)
        stride = self.shape.stride
        return ArrayView(shape, self.data[stride*index:stride*(index+1)])

    def slice(self, start: int, stop: int) -> ArrayView:
        """
        Returns the view restricted to ``[start, stop)`` along the outermost
        axis. Unlike :meth:`derank`, the number of axes is unchanged.

        :raises SliceZeroWidthError: if ``start == stop``.
        :raises SliceStopBeforeStartError: if ``start > stop``.
        :raises SliceStopPastEndError: if *stop* exceeds :func:`len`.
        """
        shape = self.shape.slice_checked(start, stop)
        stride = self.shape.stride
        return ArrayView(shape, self.data[stride*start:stride*stop])

    def one_subview(self) -> ArrayView:
        """
        Returns the first sub-view along the outermost axis. For an axis of
        length 1 this is its only sub-view.
        """
        if self.ndims == 1:
            raise Derank1DError()

        shape = self.shape.derank()
        return ArrayView(shape, self.data[:self.shape.stride])

    def iter_subviews(self) -> Iterator[ArrayView]:
        """Iterates over the sub-views along the outermost axis, in order."""
        if self.ndims == 1:
            raise Derank1DError()

        shape = self.shape.derank()
        for chunk in iter_chunks(self.data, self.shape.stride):
            yield ArrayView(shape, chunk)

    def __iter__(self) -> Iterator[Any]:
        if self.ndims == 1:
            return iter(self.data)
        else:
            return self.iter_subviews()

    def __getitem__(self, key: int | slice) -> Any:
        """
        ``view[i]`` reads an element of a one-dimensional view and deranks
        otherwise; ``view[i:j]`` slices. Negative positions count from the
        end. Steps other than 1 are not supported.
        """
        if isinstance(key, slice):
            start, stop, step = key.indices(len(self))
            if step != 1:
                raise ValueError(f"slice step must be 1 (got {step})")
            return self.slice(start, stop)

        index = operator.index(key)
        if index < 0:
            index += len(self)

        if self.ndims == 1:
            return self.at_checked(index)
        else:
            return self.derank(index)

    # }}}

    def broadcast_combine(self, other: ArrayView,
                          op: Callable[[Any, Any], Any],
                          dtype: Any = None) -> ArrayBase:
        """
        Equivalent to :func:`densor.traversal.broadcast_combine`.
        """
        from densor.traversal import broadcast_combine
        return broadcast_combine(self, other, op, dtype=dtype)

    def into_base(self) -> ArrayBase:
        """Copies the elements of the view into a new, owning array."""
        from densor.array import ArrayBase
        return ArrayBase._from_raw_parts(self.shape.into_base(),
                                         self.data.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayView):
            return False
        return (self.shape == other.shape
                and bool(np.array_equal(self.data, other.data)))

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (f"ArrayView(dims={list(self.dims)}, "
                f"data={self.data.tolist()!r})")

# }}}

# vim: fdm=marker
