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
IDX Files
---------

Arrays are stored in the IDX format: a four-byte header
``[0x00, 0x00, dtype_id, ndims]``, followed by *ndims* big-endian 32-bit
signed axis lengths (outermost axis first) and the elements in row-major
order, big-endian, at the width of their :class:`~densor.dtype.ElementKind`.

.. autofunction:: read_idx
.. autofunction:: write_idx
.. autofunction:: from_bytes
.. autofunction:: to_bytes
"""

import io
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any

import numpy as np

from densor.array import ArrayBase
from densor.diagnostic import (
    IdxIOError,
    IdxMismatchDTypeIDsError,
    IdxMismatchNDimsError,
    IdxReadUnacceptedError,
    IdxWriteUnacceptedError,
)
from densor.dtype import BOOL, kind_from_idx_id, kind_of
from densor.shape import ShapeBase
from densor.view import ArrayView


logger = logging.getLogger(__name__)

HEADER_NBYTES = 4
DIM_DTYPE = np.dtype(">i4")
MAX_NDIMS = 0xFF
MAX_DIM = np.iinfo(np.int32).max

PathOrStream = str | os.PathLike[str] | IO[bytes]


# {{{ stream helpers

@contextmanager
def _opened(target: PathOrStream, mode: str) -> Iterator[IO[bytes]]:
    if isinstance(target, (str, os.PathLike)):
        try:
            stream = open(target, mode)
        except OSError as exc:
            raise IdxIOError(str(exc)) from exc

        with stream:
            yield stream
    else:
        yield target


def _read_exact(stream: IO[bytes], nbytes: int) -> bytes:
    try:
        buf = stream.read(nbytes)
    except OSError as exc:
        raise IdxIOError(str(exc)) from exc

    if buf is None or len(buf) < nbytes:
        raise IdxReadUnacceptedError()

    return buf


def _write_all(stream: IO[bytes], buf: bytes) -> None:
    try:
        nwritten = stream.write(buf)
    except OSError as exc:
        raise IdxIOError(str(exc)) from exc

    if nwritten is not None and nwritten < len(buf):
        raise IdxWriteUnacceptedError()

# }}}


# {{{ reading

def _read_stream(stream: IO[bytes], dtype: Any, ndims: int | None,
                 name: str) -> ArrayBase:
    header = _read_exact(stream, HEADER_NBYTES)
    dtype_id, file_ndims = header[2], header[3]

    if dtype is not None:
        expected_id = kind_of(dtype).idx_id
        if dtype_id != expected_id:
            raise IdxMismatchDTypeIDsError(expected_id, dtype_id)

    kind = kind_from_idx_id(dtype_id)

    if ndims is not None and ndims != file_ndims:
        raise IdxMismatchNDimsError(ndims, file_ndims)

    outer_first = np.frombuffer(_read_exact(stream, file_ndims*DIM_DTYPE.itemsize),
                                dtype=DIM_DTYPE)
    shape = ShapeBase.new_checked(int(d) for d in outer_first[::-1])

    payload = _read_exact(stream, shape.total_volume()*kind.itemsize)
    if kind is BOOL:
        data = np.frombuffer(payload, dtype=np.uint8) != 0
    else:
        data = np.frombuffer(payload, dtype=kind.wire_dtype).astype(
                kind.numpy_dtype)

    logger.info(f"{name}: read {shape.total_volume()} elements of "
                f"'{kind}' with dims {list(shape.dims)}")

    return ArrayBase._from_raw_parts(shape, data)


def read_idx(source: PathOrStream, dtype: Any = None,
             ndims: int | None = None) -> ArrayBase:
    """
    Reads an array in IDX format from *source*, a path or a binary stream.

    :arg dtype: if given, the element kind the file must contain.
    :arg ndims: if given, the number of axes the file must contain.

    :raises densor.diagnostic.IdxMismatchDTypeIDsError: if the file's
        element kind is not *dtype*.
    :raises densor.diagnostic.IdxMismatchNDimsError: if the file's number of
        axes is not *ndims*.
    :raises densor.diagnostic.IdxReadUnacceptedError: if the data ends
        early.
    :raises densor.diagnostic.IdxIOError: if the underlying I/O fails.
    :raises ValueError: if the header names an unknown element kind or the
        dims are invalid.
    """
    with _opened(source, "rb") as stream:
        return _read_stream(stream, dtype, ndims, "read_idx")


def from_bytes(buf: bytes, dtype: Any = None,
               ndims: int | None = None) -> ArrayBase:
    """Like :func:`read_idx`, but decodes the in-memory buffer *buf*."""
    return _read_stream(io.BytesIO(buf), dtype, ndims, "from_bytes")

# }}}


# {{{ writing

def _encode(ary: ArrayBase | ArrayView) -> tuple[bytes, ...]:
    kind = ary.kind
    numpy_shape = ary.numpy_shape

    if len(numpy_shape) > MAX_NDIMS:
        raise ValueError(f"IDX files hold at most {MAX_NDIMS} axes "
                         f"(got {len(numpy_shape)})")
    if any(d > MAX_DIM for d in numpy_shape):
        raise ValueError(f"IDX axis lengths are at most {MAX_DIM} "
                         f"(got {list(numpy_shape)})")

    header = bytes([0, 0, kind.idx_id, len(numpy_shape)])
    dims = np.array(numpy_shape, dtype=DIM_DTYPE).tobytes()
    if kind is BOOL:
        payload = ary.data.astype(np.uint8).tobytes()
    else:
        payload = ary.data.astype(kind.wire_dtype).tobytes()

    return header, dims, payload


def write_idx(ary: ArrayBase | ArrayView, dest: PathOrStream) -> None:
    """
    Writes *ary* in IDX format to *dest*, a path or a binary stream.

    :raises TypeError: if the elements of *ary* are not of a supported kind.
    :raises ValueError: if *ary* has more than 255 axes or an axis longer
        than ``2**31 - 1``.
    :raises densor.diagnostic.IdxWriteUnacceptedError: if the stream stops
        accepting bytes.
    :raises densor.diagnostic.IdxIOError: if the underlying I/O fails.
    """
    chunks = _encode(ary)
    with _opened(dest, "wb") as stream:
        for chunk in chunks:
            _write_all(stream, chunk)

    logger.info(f"write_idx: wrote {len(ary.data)} elements of "
                f"'{ary.kind}' with dims {list(ary.dims)}")


def to_bytes(ary: ArrayBase | ArrayView) -> bytes:
    """Returns the IDX encoding of *ary*."""
    return b"".join(_encode(ary))

# }}}

# vim: fdm=marker
