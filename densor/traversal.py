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
Broadcast Traversal
-------------------

.. autofunction:: broadcast_combine
.. autofunction:: execute_plan
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

import numpy as np

from densor.array import ArrayBase
from densor.dtype import normalize_dtype
from densor.shape import (
    BroadcastInstruction,
    PushLinear,
    PushStretchA,
    PushStretchB,
    RecurseLinear,
    RecursePadA,
    RecursePadB,
    RecurseStretchA,
    RecurseStretchB,
)
from densor.view import ArrayView, iter_chunks


logger = logging.getLogger(__name__)


def _recurse(a: np.ndarray, b: np.ndarray,
             instructions: Sequence[BroadcastInstruction], depth: int,
             out: list[Any], op: Callable[[Any, Any], Any]) -> None:
    instr = instructions[depth]

    if isinstance(instr, PushLinear):
        out.extend(map(op, a, b))
    elif isinstance(instr, PushStretchA):
        a_0 = a[0]
        out.extend(op(a_0, b_n) for b_n in b)
    elif isinstance(instr, PushStretchB):
        b_0 = b[0]
        out.extend(op(a_n, b_0) for a_n in a)
    elif isinstance(instr, RecurseLinear):
        for a_chunk, b_chunk in zip(iter_chunks(a, instr.stride_a),
                                    iter_chunks(b, instr.stride_b)):
            _recurse(a_chunk, b_chunk, instructions, depth-1, out, op)
    elif isinstance(instr, RecurseStretchA):
        # a has length 1 along this axis: all of its data is the one chunk
        for b_chunk in iter_chunks(b, instr.stride_b):
            _recurse(a, b_chunk, instructions, depth-1, out, op)
    elif isinstance(instr, RecurseStretchB):
        for a_chunk in iter_chunks(a, instr.stride_a):
            _recurse(a_chunk, b, instructions, depth-1, out, op)
    elif isinstance(instr, RecursePadA):
        for b_chunk in iter_chunks(b, instr.stride_b):
            _recurse(a, b_chunk, instructions, depth-1, out, op)
    elif isinstance(instr, RecursePadB):
        for a_chunk in iter_chunks(a, instr.stride_a):
            _recurse(a_chunk, b, instructions, depth-1, out, op)
    else:
        raise NotImplementedError(
                f"unknown broadcast instruction: {type(instr).__name__}")


def execute_plan(a: np.ndarray, b: np.ndarray,
                 instructions: Sequence[BroadcastInstruction],
                 op: Callable[[Any, Any], Any]) -> list[Any]:
    """
    Interprets *instructions* (as produced by
    :meth:`densor.shape.Shape.broadcast`) over the flat buffers *a* and *b*
    and returns the list of results of *op* in row-major order of the
    broadcast shape.

    The outermost instruction, i.e. the last one, is executed first.
    """
    out: list[Any] = []
    _recurse(a, b, instructions, len(instructions)-1, out, op)
    return out


def broadcast_combine(a: ArrayView, b: ArrayView,
                      op: Callable[[Any, Any], Any],
                      dtype: Any = None) -> ArrayBase:
    """
    Applies the binary function *op* elementwise to *a* and *b* after
    broadcasting them against each other, without materializing either
    broadcast operand.

    *op* is called exactly once per output element, with the element of *a*
    as its first argument. The results are stored in row-major order of the
    broadcast shape (the outermost axis varies slowest).

    :arg dtype: The element type of the result, an
        :class:`~densor.dtype.ElementKind` or anything :class:`numpy.dtype`
        accepts. If *None*, it is inferred by :func:`numpy.asarray` from
        the values *op* returned.

    :raises densor.diagnostic.CannotBroadcastError: if the shapes of *a* and
        *b* are not broadcast-compatible.
    """
    from densor import DEBUG_ENABLED

    result_shape, instructions = a.shape.broadcast(b.shape)

    if DEBUG_ENABLED:
        logger.debug("broadcast_combine: %s x %s -> %s via %s",
                     list(a.dims), list(b.dims), list(result_shape.dims),
                     instructions)

    out = execute_plan(a.data, b.data, instructions, op)

    if DEBUG_ENABLED:
        assert len(out) == result_shape.total_volume(), \
                (len(out), result_shape)

    data = np.asarray(out, dtype=normalize_dtype(dtype))
    if data.ndim != 1:
        raise TypeError("the combining function must return scalars")

    return ArrayBase._from_raw_parts(result_shape, data)

# vim: fdm=marker
