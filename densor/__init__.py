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

from numpy import dtype


# {{{ debug control

import ast
import os
try:
    v = os.environ.get("DENSOR_DEBUG")
    if v is None:
        v = ""

    DEBUG_ENABLED = bool(ast.literal_eval(v)) if v.strip() else False
except (ValueError, TypeError, SyntaxError):
    DEBUG_ENABLED = False


def set_debug_enabled(flag: bool) -> None:
    """
    Set whether :mod:`densor` should log broadcast plans and re-check the
    volume of every broadcast result.
    """
    global DEBUG_ENABLED
    DEBUG_ENABLED = flag

# }}}


from densor.version import VERSION, VERSION_TEXT
from densor.diagnostic import (
        DensorError,
        ShapeZeroDimsError, ShapeZeroLenDimError, ShapeDataMisalignmentError,
        CannotBroadcastError, MatMulError,
        Derank1DError, DerankIndexOutOfBoundsError, ReadNDimError,
        SliceZeroWidthError, SliceStopBeforeStartError, SliceStopPastEndError,
        IdxError, IdxIOError, IdxReadUnacceptedError, IdxWriteUnacceptedError,
        IdxMismatchDTypeIDsError, IdxMismatchNDimsError,
        )
from densor.dtype import (
        ElementKind, BOOL, UINT8, INT8, INT16, INT32, FLOAT32, FLOAT64,
        kind_from_idx_id, kind_of,
        )
from densor.shape import ShapeBase, Shape, broadcast_shapes
from densor.view import ArrayView
from densor.array import (
        ArrayBase,

        make_array, full, zeros, ones, arange,

        add, subtract, multiply, divide, remainder,

        equal, not_equal, less, less_equal, greater, greater_equal,

        logical_and, logical_or,

        maximum, minimum,

        matmul,
        )
from densor.traversal import broadcast_combine
from densor.idx import read_idx, write_idx, from_bytes, to_bytes

__all__ = (
        "dtype",

        "set_debug_enabled",

        "VERSION", "VERSION_TEXT",

        "DensorError",
        "ShapeZeroDimsError", "ShapeZeroLenDimError",
        "ShapeDataMisalignmentError",
        "CannotBroadcastError", "MatMulError",
        "Derank1DError", "DerankIndexOutOfBoundsError", "ReadNDimError",
        "SliceZeroWidthError", "SliceStopBeforeStartError",
        "SliceStopPastEndError",
        "IdxError", "IdxIOError", "IdxReadUnacceptedError",
        "IdxWriteUnacceptedError", "IdxMismatchDTypeIDsError",
        "IdxMismatchNDimsError",

        "ElementKind", "BOOL", "UINT8", "INT8", "INT16", "INT32", "FLOAT32",
        "FLOAT64", "kind_from_idx_id", "kind_of",

        "ShapeBase", "Shape", "broadcast_shapes",

        "ArrayBase", "ArrayView",

        "make_array", "full", "zeros", "ones", "arange",

        "add", "subtract", "multiply", "divide", "remainder",

        "equal", "not_equal", "less", "less_equal", "greater", "greater_equal",

        "logical_and", "logical_or",

        "maximum", "minimum",

        "matmul",

        "broadcast_combine",

        "read_idx", "write_idx", "from_bytes", "to_bytes",
)
