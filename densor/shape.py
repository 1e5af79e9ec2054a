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
Shapes
------

Dimensions are stored *innermost first*: ``dims[0]`` is the length of the
fastest-varying axis, ``dims[-1]`` the length of the outermost one. This is the
reverse of :attr:`numpy.ndarray.shape`.

.. autoclass:: ShapeBase
.. autoclass:: Shape

Broadcasting
^^^^^^^^^^^^

:meth:`Shape.broadcast` reconciles two shapes following NumPy's rules and
returns, alongside the output shape, one instruction per output axis telling
:func:`densor.traversal.broadcast_combine` how to walk the operands along that
axis.

.. autoclass:: BroadcastInstruction
.. autoclass:: PushLinear
.. autoclass:: PushStretchA
.. autoclass:: PushStretchB
.. autoclass:: RecurseLinear
.. autoclass:: RecurseStretchA
.. autoclass:: RecurseStretchB
.. autoclass:: RecursePadA
.. autoclass:: RecursePadB

.. autofunction:: broadcast_shapes
"""

import dataclasses
from collections.abc import Iterable, Iterator, Sequence
from itertools import accumulate, chain, zip_longest
from numbers import Integral

from pytools import memoize_method

from densor.diagnostic import (
    CannotBroadcastError,
    Derank1DError,
    DerankIndexOutOfBoundsError,
    ShapeZeroDimsError,
    ShapeZeroLenDimError,
    SliceStopBeforeStartError,
    SliceStopPastEndError,
    SliceZeroWidthError,
)


# {{{ shape base

def _normalize_dims(dims: Iterable[int]) -> tuple[int, ...]:
    def normalize_dim(d: int) -> int:
        # bool is an Integral, but never a sensible axis length
        if isinstance(d, bool) or not isinstance(d, Integral):
            raise TypeError("array dimension must be an int, "
                            f"got {type(d).__name__}.")
        if d < 0:
            raise ValueError(f"array dimension must be nonnegative (got '{d}')")
        return int(d)

    return tuple(normalize_dim(d) for d in dims)


class ShapeBase:
    """
    The owned dimension vector of an array, together with its table of
    cumulative volumes.

    .. attribute:: dims

        A :class:`tuple` of axis lengths, innermost first.

    .. attribute:: volumes

        A :class:`tuple` of length ``len(dims) + 1`` with ``volumes[0] == 1``
        and ``volumes[i] == volumes[i-1] * dims[i-1]``. ``volumes[i]`` is the
        number of elements spanned by one step along axis *i*.

    .. automethod:: new_checked
    .. automethod:: total_volume
    .. automethod:: view

    Instances are immutable and compare by :attr:`dims`.
    """

    __slots__ = ("dims", "volumes")

    dims: tuple[int, ...]
    volumes: tuple[int, ...]

    def __init__(self, dims: Sequence[int]) -> None:
        # unchecked: use new_checked for anything caller-supplied
        dims = tuple(dims)
        object.__setattr__(self, "dims", dims)
        object.__setattr__(self, "volumes",
                           tuple(accumulate(dims, initial=1,
                                            func=lambda vol, d: vol * d)))

    @classmethod
    def new_checked(cls, dims: Iterable[int]) -> ShapeBase:
        """
        :raises ShapeZeroDimsError: if *dims* is empty.
        :raises ShapeZeroLenDimError: if any entry of *dims* is 0.
        """
        dims = _normalize_dims(dims)
        if len(dims) == 0:
            raise ShapeZeroDimsError()
        if any(d == 0 for d in dims):
            raise ShapeZeroLenDimError(list(dims))

        return cls(dims)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"'{type(self).__name__}' is immutable")

    @property
    def ndims(self) -> int:
        return len(self.dims)

    def total_volume(self) -> int:
        return self.volumes[-1]

    def view(self) -> Shape:
        """Returns a :class:`Shape` spanning all axes of *self*."""
        return Shape(self, len(self.dims), self.dims[-1])

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ShapeBase) and self.dims == other.dims

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash((ShapeBase, self.dims))

    def __repr__(self) -> str:
        return f"ShapeBase({list(self.dims)})"

    def __reduce__(self) -> tuple[type[ShapeBase], tuple[tuple[int, ...]]]:
        return (ShapeBase, (self.dims,))

# }}}


# {{{ broadcast instructions

class BroadcastInstruction:
    """
    One step of a broadcast plan. Plans are ordered innermost axis first; the
    first entry is always one of the ``Push*`` variants, all others are
    ``Recurse*`` variants.

    The ``stride_a``/``stride_b`` attributes of the ``Recurse*`` variants are
    the number of elements of the respective operand spanned by one step
    along the axis the instruction describes.
    """


@dataclasses.dataclass(frozen=True)
class PushLinear(BroadcastInstruction):
    """Combine both operands' flat data pairwise."""


@dataclasses.dataclass(frozen=True)
class PushStretchA(BroadcastInstruction):
    """Combine *a*'s single element with each element of *b*."""


@dataclasses.dataclass(frozen=True)
class PushStretchB(BroadcastInstruction):
    """Combine each element of *a* with *b*'s single element."""


@dataclasses.dataclass(frozen=True)
class RecurseLinear(BroadcastInstruction):
    """Both operands have this axis with equal length: recurse pairwise."""
    stride_a: int
    stride_b: int


@dataclasses.dataclass(frozen=True)
class RecurseStretchA(BroadcastInstruction):
    """*a* has length 1 along this axis and is reused for each chunk of *b*."""
    stride_b: int


@dataclasses.dataclass(frozen=True)
class RecurseStretchB(BroadcastInstruction):
    """*b* has length 1 along this axis and is reused for each chunk of *a*."""
    stride_a: int


@dataclasses.dataclass(frozen=True)
class RecursePadA(BroadcastInstruction):
    """*a* does not have this axis; all of it is reused for each chunk of *b*."""
    stride_b: int


@dataclasses.dataclass(frozen=True)
class RecursePadB(BroadcastInstruction):
    """*b* does not have this axis; all of it is reused for each chunk of *a*."""
    stride_a: int


def _to_push(instr: BroadcastInstruction) -> BroadcastInstruction:
    if isinstance(instr, RecurseLinear):
        return PushLinear()
    elif isinstance(instr, RecurseStretchA):
        return PushStretchA()
    elif isinstance(instr, RecurseStretchB):
        return PushStretchB()
    else:
        # the innermost axis exists on both operands since ranks are >= 1
        raise AssertionError(f"cannot start a broadcast plan with {instr}")

# }}}


# {{{ shape view

@dataclasses.dataclass(frozen=True, eq=False)
class Shape:
    """
    A window into a :class:`ShapeBase` as seen after some number of
    rank reductions and slices. Views borrow their base and never modify it.

    .. attribute:: base

        The :class:`ShapeBase` this view reads from.

    .. attribute:: ndims

        Number of unreduced axes. Axes ``0 .. ndims-2`` of :attr:`base` are
        the inner axes; axis ``ndims-1`` is the current trailing (outermost)
        axis.

    .. attribute:: len

        Length of the trailing axis. Equal to ``base.dims[ndims-1]`` unless the
        view was sliced.

    .. autoattribute:: stride
    .. autoattribute:: volume
    .. autoattribute:: inner_dims
    .. autoattribute:: inner_volumes

    .. automethod:: to_dims
    .. automethod:: derank_checked
    .. automethod:: slice_checked
    .. automethod:: broadcast
    .. automethod:: into_base
    """
    base: ShapeBase
    ndims: int
    len: int

    if __debug__:
        def __post_init__(self) -> None:
            assert 1 <= self.ndims <= len(self.base.dims)
            assert 1 <= self.len <= self.base.dims[self.ndims - 1]

    @property
    def stride(self) -> int:
        """
        Number of elements spanned by one step along the trailing axis, i.e.
        the product of the inner axis lengths.
        """
        return self.base.volumes[self.ndims - 1]

    @property
    def volume(self) -> int:
        """Number of elements covered by the view."""
        return self.len * self.stride

    @property
    def inner_dims(self) -> tuple[int, ...]:
        return self.base.dims[:self.ndims - 1]

    @property
    def inner_volumes(self) -> tuple[int, ...]:
        return self.base.volumes[:self.ndims]

    def dims_iter(self) -> Iterator[int]:
        """Iterates over the axis lengths of the view, innermost first."""
        return chain(self.base.dims[:self.ndims - 1], (self.len,))

    @memoize_method
    def to_dims(self) -> tuple[int, ...]:
        return tuple(self.dims_iter())

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Shape) and self.to_dims() == other.to_dims()

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash((Shape, self.to_dims()))

    def __repr__(self) -> str:
        return f"Shape({list(self.to_dims())})"

    # {{{ rank reduction and slicing

    def derank(self) -> Shape:
        """
        Returns the view with the trailing axis dropped. The caller must
        ensure ``ndims > 1``.
        """
        return Shape(self.base, self.ndims - 1, self.base.dims[self.ndims - 2])

    def derank_checked(self, index: int) -> Shape:
        """
        Returns the shape of the sub-view at position *index* along the
        trailing axis.

        :raises Derank1DError: if the view has a single axis.
        :raises DerankIndexOutOfBoundsError: if *index* is not below
            :attr:`len`.
        """
        if self.ndims == 1:
            raise Derank1DError()
        if not 0 <= index < self.len:
            raise DerankIndexOutOfBoundsError(self.len, index)

        return self.derank()

    def slice_checked(self, start: int, stop: int) -> Shape:
        """
        Returns the shape of the view restricted to ``[start, stop)`` along
        the trailing axis.

        :raises SliceZeroWidthError: if ``start == stop``.
        :raises SliceStopBeforeStartError: if ``start > stop``.
        :raises SliceStopPastEndError: if ``stop > len``.
        """
        if start == stop:
            raise SliceZeroWidthError(start)
        if start > stop:
            raise SliceStopBeforeStartError(start, stop)
        if stop > self.len:
            raise SliceStopPastEndError(stop, self.len)
        if start < 0:
            raise IndexError(f"slice start must be nonnegative (got {start})")

        return Shape(self.base, self.ndims, stop - start)

    # }}}

    def into_base(self) -> ShapeBase:
        """Returns a fresh :class:`ShapeBase` with this view's dims."""
        if self.len == self.base.dims[self.ndims - 1] \
                and self.ndims == len(self.base.dims):
            return self.base
        return ShapeBase(self.to_dims())

    # {{{ broadcasting

    def broadcast(self, other: Shape
                  ) -> tuple[ShapeBase, list[BroadcastInstruction]]:
        """
        Computes the shape that *self* and *other* broadcast to, along with
        the plan to traverse both operands in row-major order of the result.

        Axes are matched innermost first. Along each axis:

        - equal lengths (including ``1`` and ``1``) are traversed linearly,
        - an operand of length 1 is stretched over the other's length,
        - an operand that has run out of axes is padded, i.e. reused whole.

        The returned instructions are ordered innermost first; the innermost
        one is a ``Push*`` variant.

        :raises CannotBroadcastError: if at some axis both operands have
            lengths that differ and neither of which is 1.
        """
        dims: list[int] = []
        instructions: list[BroadcastInstruction] = []
        stride_a = stride_b = 1

        for next_a, next_b in zip_longest(self.dims_iter(), other.dims_iter()):
            instr: BroadcastInstruction
            if next_a is not None and next_b is not None and next_a == next_b:
                dim = next_a
                instr = RecurseLinear(stride_a, stride_b)
            elif next_a is not None and next_b == 1:
                dim = next_a
                instr = RecurseStretchB(stride_a)
            elif next_a == 1 and next_b is not None:
                dim = next_b
                instr = RecurseStretchA(stride_b)
            elif next_a is not None and next_b is None:
                dim = next_a
                instr = RecursePadB(stride_a)
            elif next_a is None and next_b is not None:
                dim = next_b
                instr = RecursePadA(stride_b)
            else:
                raise CannotBroadcastError(list(self.to_dims()),
                                           list(other.to_dims()))

            stride_a *= 1 if next_a is None else next_a
            stride_b *= 1 if next_b is None else next_b

            dims.append(dim)
            instructions.append(instr)

        instructions[0] = _to_push(instructions[0])

        return ShapeBase(dims), instructions

    # }}}


def broadcast_shapes(dims1: Sequence[int], dims2: Sequence[int]) -> ShapeBase:
    """
    Returns the :class:`ShapeBase` that arrays with innermost-first dims
    *dims1* and *dims2* broadcast to.

    :raises CannotBroadcastError: if the shapes are incompatible.
    """
    result, _ = ShapeBase.new_checked(dims1).view().broadcast(
            ShapeBase.new_checked(dims2).view())
    return result

# }}}

# vim: fdm=marker
