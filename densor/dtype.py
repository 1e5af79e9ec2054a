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
Element Kinds
-------------

:mod:`densor` stores elements of a closed set of kinds. Each kind knows its
identifier in the IDX file format, its width in bytes and the
:class:`numpy.dtype` used for its in-memory buffer.

.. autoclass:: ElementKind

.. data:: BOOL
.. data:: UINT8
.. data:: INT8
.. data:: INT16
.. data:: INT32
.. data:: FLOAT32
.. data:: FLOAT64

.. autofunction:: kind_from_idx_id
.. autofunction:: kind_of
.. autofunction:: is_supported
.. autofunction:: normalize_dtype
"""

import dataclasses
from typing import Any

import numpy as np
from immutabledict import immutabledict


@dataclasses.dataclass(frozen=True)
class ElementKind:
    """
    .. attribute:: label

        Human readable name, e.g. ``"int16"``.

    .. attribute:: idx_id

        The type byte of the IDX header.

    .. attribute:: itemsize

        Number of bytes one element occupies in an IDX payload.

    .. attribute:: numpy_dtype

        Native-endian :class:`numpy.dtype` of in-memory buffers.
    """
    label: str
    idx_id: int
    itemsize: int
    numpy_dtype: np.dtype[Any]

    @property
    def wire_dtype(self) -> np.dtype[Any]:
        """Big-endian :class:`numpy.dtype` of this kind in an IDX payload."""
        return self.numpy_dtype.newbyteorder(">")

    def __str__(self) -> str:
        return self.label


BOOL = ElementKind("bool", 0x07, 1, np.dtype(np.bool_))
UINT8 = ElementKind("uint8", 0x08, 1, np.dtype(np.uint8))
INT8 = ElementKind("int8", 0x09, 1, np.dtype(np.int8))
INT16 = ElementKind("int16", 0x0B, 2, np.dtype(np.int16))
INT32 = ElementKind("int32", 0x0C, 4, np.dtype(np.int32))
FLOAT32 = ElementKind("float32", 0x0D, 4, np.dtype(np.float32))
FLOAT64 = ElementKind("float64", 0x0E, 8, np.dtype(np.float64))

ALL_KINDS = (BOOL, UINT8, INT8, INT16, INT32, FLOAT32, FLOAT64)

_IDX_ID_TO_KIND: immutabledict[int, ElementKind] = immutabledict(
        {kind.idx_id: kind for kind in ALL_KINDS})
_DTYPE_TO_KIND: immutabledict[np.dtype[Any], ElementKind] = immutabledict(
        {kind.numpy_dtype: kind for kind in ALL_KINDS})


def kind_from_idx_id(idx_id: int) -> ElementKind:
    """
    Returns the :class:`ElementKind` whose IDX type byte is *idx_id*.

    :raises ValueError: if no kind uses *idx_id*.
    """
    try:
        return _IDX_ID_TO_KIND[idx_id]
    except KeyError:
        raise ValueError(f"unknown IDX dtype ID: 0x{idx_id:02X}") from None


def kind_of(dtype: Any) -> ElementKind:
    """
    Returns the :class:`ElementKind` for *dtype*, which may be anything
    :class:`numpy.dtype` accepts or an :class:`ElementKind`.

    :raises TypeError: if *dtype* is not one of the supported kinds.
    """
    if isinstance(dtype, ElementKind):
        return dtype

    np_dtype = np.dtype(dtype).newbyteorder("=")
    try:
        return _DTYPE_TO_KIND[np_dtype]
    except KeyError:
        raise TypeError(f"unsupported element type: '{np_dtype}' "
                        "(expected one of "
                        f"{', '.join(k.label for k in ALL_KINDS)})") from None


def normalize_dtype(dtype: Any) -> Any:
    """
    Returns *dtype* with an :class:`ElementKind` replaced by its
    :attr:`~ElementKind.numpy_dtype`. Anything else is returned unchanged.
    """
    if isinstance(dtype, ElementKind):
        return dtype.numpy_dtype
    return dtype


def is_supported(dtype: Any) -> bool:
    try:
        kind_of(dtype)
    except TypeError:
        return False
    else:
        return True

# vim: fdm=marker
