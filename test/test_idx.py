#!/usr/bin/env python
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

import io
import logging
import sys

import numpy as np
import pytest

import densor as dn
from densor.diagnostic import (
    IdxError,
    IdxIOError,
    IdxMismatchDTypeIDsError,
    IdxMismatchNDimsError,
    IdxReadUnacceptedError,
    IdxWriteUnacceptedError,
    ShapeZeroDimsError,
)
from densor.dtype import ALL_KINDS
from densor.idx import from_bytes, read_idx, to_bytes, write_idx


# {{{ encoding

def test_encoding_layout():
    ary = dn.make_array([3, 2], [1, 2, 3, 4, 5, 6], dtype=np.int16)

    buf = to_bytes(ary)

    assert buf[:4] == bytes([0x00, 0x00, 0x0B, 0x02])
    # axis lengths are stored outermost first
    assert buf[4:12] == bytes([0, 0, 0, 2, 0, 0, 0, 3])
    assert buf[12:] == b"".join(x.to_bytes(2, "big")
                                for x in [1, 2, 3, 4, 5, 6])


def test_float_payload_is_big_endian():
    ary = dn.make_array([1], [1.0], dtype=np.float32)
    assert to_bytes(ary)[-4:] == bytes([0x3F, 0x80, 0x00, 0x00])


def test_bool_payload():
    ary = dn.make_array([3], [True, False, True])
    assert to_bytes(ary)[-3:] == bytes([1, 0, 1])

    # any nonzero byte reads back as True
    decoded = from_bytes(bytes([0, 0, 0x07, 1, 0, 0, 0, 2, 0, 5]))
    assert decoded.data.tolist() == [False, True]


@pytest.mark.parametrize("kind", ALL_KINDS, ids=str)
def test_round_trip(kind):
    ref = np.arange(24).reshape(2, 3, 4) % 5
    ary = dn.ArrayBase.from_numpy(ref).astype(kind)

    decoded = from_bytes(to_bytes(ary))

    assert decoded == ary
    assert decoded.kind is kind
    assert decoded.dtype == kind.numpy_dtype
    assert decoded.dtype.isnative


def test_write_view():
    ary = dn.arange([2, 3], dtype=np.uint8)
    assert from_bytes(to_bytes(ary.derank(1))) == ary.derank(1).into_base()


def test_unencodable_arrays():
    with pytest.raises(TypeError):
        to_bytes(dn.make_array([1], [1j]))
    with pytest.raises(TypeError):
        to_bytes(dn.arange([2], dtype=np.int64))
    with pytest.raises(ValueError):
        to_bytes(dn.ones([1] * 256, dtype=np.uint8))

# }}}


# {{{ decoding

def test_header_padding_bytes_are_ignored():
    buf = bytearray(to_bytes(dn.make_array([2], [7, 9], dtype=np.uint8)))
    buf[0] = 0xAB
    buf[1] = 0xCD

    assert from_bytes(bytes(buf)).data.tolist() == [7, 9]


def test_expected_kind_and_rank():
    buf = to_bytes(dn.arange([2, 2], dtype=np.int32))

    assert from_bytes(buf, dtype=np.int32, ndims=2).dims == (2, 2)
    assert from_bytes(buf, dtype=dn.INT32).kind is dn.INT32

    with pytest.raises(IdxMismatchDTypeIDsError) as exc_info:
        from_bytes(buf, dtype=np.float64)
    assert exc_info.value == IdxMismatchDTypeIDsError(0x0E, 0x0C)

    with pytest.raises(IdxMismatchNDimsError) as exc_info:
        from_bytes(buf, ndims=3)
    assert exc_info.value == IdxMismatchNDimsError(3, 2)


@pytest.mark.parametrize("nbytes", [0, 3, 6, 9, 11])
def test_short_reads(nbytes):
    buf = to_bytes(dn.arange([2], dtype=np.int16))
    assert len(buf) == 12

    with pytest.raises(IdxReadUnacceptedError):
        from_bytes(buf[:nbytes])


def test_invalid_headers():
    with pytest.raises(ValueError):
        from_bytes(bytes([0, 0, 0x0A, 1, 0, 0, 0, 1, 0]))

    with pytest.raises(ShapeZeroDimsError):
        from_bytes(bytes([0, 0, 0x08, 0]))

    with pytest.raises(ValueError):
        from_bytes(bytes([0, 0, 0x08, 1, 0xFF, 0xFF, 0xFF, 0xFF]))

# }}}


# {{{ files and streams

def test_file_round_trip(tmp_path, caplog):
    ary = dn.make_array([4, 3], np.linspace(-1, 1, 12), dtype=np.float64)
    path = tmp_path / "ary.idx"

    with caplog.at_level(logging.INFO, logger="densor.idx"):
        write_idx(ary, path)
        decoded = read_idx(str(path), dtype=np.float64, ndims=2)

    assert decoded == ary
    assert path.stat().st_size == 4 + 2*4 + 12*8
    assert sum("idx" in rec.name for rec in caplog.records) == 2


def test_stream_round_trip():
    ary = dn.make_array([5], [-2, -1, 0, 1, 2], dtype=np.int8)
    stream = io.BytesIO()

    write_idx(ary, stream)
    stream.seek(0)

    assert read_idx(stream) == ary


def test_missing_file(tmp_path):
    with pytest.raises(IdxIOError) as exc_info:
        read_idx(tmp_path / "does-not-exist.idx")

    assert isinstance(exc_info.value, IdxError)
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


class _FailingStream(io.RawIOBase):
    def writable(self):
        return True

    def write(self, b):
        raise OSError("disk full")


class _ShortStream(io.RawIOBase):
    def writable(self):
        return True

    def write(self, b):
        return min(len(b), 2)


def test_write_failures():
    ary = dn.arange([4], dtype=np.int32)

    with pytest.raises(IdxIOError) as exc_info:
        write_idx(ary, _FailingStream())
    assert exc_info.value == IdxIOError("disk full")

    with pytest.raises(IdxWriteUnacceptedError):
        write_idx(ary, _ShortStream())

# }}}


if __name__ == "__main__":
    if len(sys.argv) > 1:
        exec(sys.argv[1])
    else:
        from pytest import main
        main([__file__])

# vim: fdm=marker
