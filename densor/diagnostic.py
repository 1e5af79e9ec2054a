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
Errors
------

Every failure detected by :mod:`densor` is reported by raising one of the
exceptions below. They carry the offending values as attributes and compare
equal when their type and attributes agree.

.. autoexception:: DensorError

Construction
^^^^^^^^^^^^

.. autoexception:: ShapeZeroDimsError
.. autoexception:: ShapeZeroLenDimError
.. autoexception:: ShapeDataMisalignmentError

Broadcasting
^^^^^^^^^^^^

.. autoexception:: CannotBroadcastError
.. autoexception:: MatMulError

View navigation
^^^^^^^^^^^^^^^

.. autoexception:: Derank1DError
.. autoexception:: DerankIndexOutOfBoundsError
.. autoexception:: ReadNDimError
.. autoexception:: SliceZeroWidthError
.. autoexception:: SliceStopBeforeStartError
.. autoexception:: SliceStopPastEndError

IDX files
^^^^^^^^^

.. autoexception:: IdxError
.. autoexception:: IdxIOError
.. autoexception:: IdxReadUnacceptedError
.. autoexception:: IdxWriteUnacceptedError
.. autoexception:: IdxMismatchDTypeIDsError
.. autoexception:: IdxMismatchNDimsError
"""

from typing import Any, ClassVar


class DensorError(Exception):
    """
    Base class for all errors raised by :mod:`densor`.

    Subclasses list the names of their attributes in :attr:`_fields`; those
    attributes take part in equality and hashing.
    """
    _fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *args: Any) -> None:
        if len(args) != len(self._fields):
            raise TypeError(f"{type(self).__name__} takes {len(self._fields)} "
                            f"arguments, got {len(args)}")
        for name, value in zip(self._fields, args):
            setattr(self, name, value)

        super().__init__(self._message())

    def _message(self) -> str:
        raise NotImplementedError

    def _field_values(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self._fields)

    def __eq__(self, other: object) -> bool:
        return (type(self) is type(other)
                and self._field_values() == other._field_values())  # type: ignore[attr-defined]  # noqa: E501

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash((type(self).__name__,
                     *(tuple(v) if isinstance(v, list) else v
                       for v in self._field_values())))

    def __repr__(self) -> str:
        args = ", ".join(f"{name}={getattr(self, name)!r}"
                         for name in self._fields)
        return f"{type(self).__name__}({args})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), self._field_values())


# {{{ construction

class ShapeZeroDimsError(DensorError, ValueError):
    def _message(self) -> str:
        return "shape cannot be constructed with 0 dims"


class ShapeZeroLenDimError(DensorError, ValueError):
    _fields = ("dims",)

    def _message(self) -> str:
        return f"shape cannot have a dim of width 0, received {self.dims}"


class ShapeDataMisalignmentError(DensorError, ValueError):
    _fields = ("volume", "len")

    def _message(self) -> str:
        return (f"shape volume is {self.volume}, but {self.len} elements "
                "were provided")

# }}}


# {{{ broadcasting

class CannotBroadcastError(DensorError, ValueError):
    """
    .. attribute:: dims1
    .. attribute:: dims2

        The innermost-first dims of the two operands, as :class:`list`\\ s.
    """
    _fields = ("dims1", "dims2")

    def _message(self) -> str:
        return ("operands could not be broadcast together with shapes "
                f"{self.dims1}, {self.dims2}")


class MatMulError(DensorError, ValueError):
    _fields = ("rows_a", "cols_b")

    def _message(self) -> str:
        return (f"cannot matrix multiply: first has {self.rows_a} rows, "
                f"second has {self.cols_b} cols")

# }}}


# {{{ view navigation

class Derank1DError(DensorError, IndexError):
    def _message(self) -> str:
        return "cannot slice down to a smaller dimension from a 1D array"


class DerankIndexOutOfBoundsError(DensorError, IndexError):
    _fields = ("len", "index")

    def _message(self) -> str:
        return f"cannot derank at index {self.index} when len is {self.len}"


class ReadNDimError(DensorError, IndexError):
    _fields = ("ndims",)

    def _message(self) -> str:
        return ("cannot read an individual value from an array with more "
                f"than 1 dim, has {self.ndims} dims")


class SliceZeroWidthError(DensorError, IndexError):
    _fields = ("index",)

    def _message(self) -> str:
        return (f"slice cannot have 0 size, start: {self.index}, "
                f"stop: {self.index}")


class SliceStopBeforeStartError(DensorError, IndexError):
    _fields = ("start", "stop")

    def _message(self) -> str:
        return (f"slice start, {self.start}, cannot be greater than "
                f"stop, {self.stop}")


class SliceStopPastEndError(DensorError, IndexError):
    _fields = ("stop", "len")

    def _message(self) -> str:
        return (f"cannot slice array of len {self.len} with a slice "
                f"stopping at {self.stop}")

# }}}


# {{{ idx files

class IdxError(DensorError, OSError):
    """Base class for failures while reading or writing IDX data."""


class IdxIOError(IdxError):
    """Wraps an :class:`OSError` raised by the underlying stream."""
    _fields = ("message",)

    def _message(self) -> str:
        return str(self.message)


class IdxReadUnacceptedError(IdxError):
    def _message(self) -> str:
        return "reader no longer providing bytes"


class IdxWriteUnacceptedError(IdxError):
    def _message(self) -> str:
        return "writer no longer accepting bytes"


class IdxMismatchDTypeIDsError(IdxError):
    _fields = ("expected", "actual")

    def _message(self) -> str:
        return f"expected dtype ID: {self.expected}, found ID: {self.actual}"


class IdxMismatchNDimsError(IdxError):
    _fields = ("expected", "actual")

    def _message(self) -> str:
        return f"expected {self.expected} dims, found {self.actual} dims"

# }}}

# vim: fdm=marker
