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

import sys

import numpy as np
import pytest

import densor as dn
from densor.diagnostic import (
    Derank1DError,
    DerankIndexOutOfBoundsError,
    ReadNDimError,
    SliceStopBeforeStartError,
    SliceStopPastEndError,
    SliceZeroWidthError,
)
from densor.view import ArrayView, iter_chunks


def test_derank_slice_round_trip():
    ary = dn.make_array([2, 3], [0, 1, 2, 3, 4, 5])

    sub = ary.slice(1, 3).derank(0)

    assert sub.dims == (2,)
    assert sub.data.tolist() == [2, 3]


def test_derank():
    ary = dn.arange([2, 3, 4])
    view = ary.view()

    sub = view.derank(2)
    assert sub.ndims == 2
    assert sub.dims == (2, 3)
    assert sub.data.tolist() == list(range(12, 18))

    assert sub.derank(1).data.tolist() == [14, 15]


def test_slice_keeps_rank():
    view = dn.arange([2, 3, 4]).view()

    sliced = view.slice(1, 3)
    assert sliced.ndims == 3
    assert sliced.dims == (2, 3, 2)
    assert len(sliced) == 2
    assert sliced.data.tolist() == list(range(6, 18))


def test_views_share_data():
    ary = dn.arange([4, 4])
    sub = ary.derank(1).slice(1, 3)

    assert np.shares_memory(sub.data, ary.data)
    assert not sub.data.flags.writeable


@pytest.mark.parametrize(("start", "stop", "exc"), [
    (1, 1, SliceZeroWidthError(1)),
    (2, 1, SliceStopBeforeStartError(2, 1)),
    (2, 4, SliceStopPastEndError(4, 3)),
    ])
def test_slice_errors(start, stop, exc):
    view = dn.arange([2, 3]).view()

    with pytest.raises(type(exc)) as exc_info:
        view.slice(start, stop)

    assert exc_info.value == exc


def test_slice_errors_on_1d():
    view = dn.arange([3]).view()

    with pytest.raises(SliceZeroWidthError):
        view.slice(1, 1)
    with pytest.raises(SliceStopPastEndError):
        view.slice(0, 5)


def test_derank_errors():
    view = dn.arange([2, 3]).view()

    with pytest.raises(DerankIndexOutOfBoundsError) as exc_info:
        view.derank(3)
    assert exc_info.value == DerankIndexOutOfBoundsError(3, 3)

    with pytest.raises(Derank1DError):
        view.derank(0).derank(0)

    # the view is unchanged by failed navigation
    assert view.dims == (2, 3)


def test_at_checked():
    view = dn.make_array([3], [7, 8, 9]).view()

    assert view.at_checked(0) == 7
    assert view.at_checked(2) == 9

    with pytest.raises(DerankIndexOutOfBoundsError) as exc_info:
        view.at_checked(3)
    assert exc_info.value == DerankIndexOutOfBoundsError(3, 3)

    with pytest.raises(ReadNDimError) as exc_info:
        dn.arange([2, 2]).view().at_checked(0)
    assert exc_info.value == ReadNDimError(2)


def test_getitem():
    ary = dn.arange([3, 2])

    assert ary[1].data.tolist() == [3, 4, 5]
    assert ary[-1].data.tolist() == [3, 4, 5]
    assert ary[1][2] == 5
    assert ary[1][-1] == 5
    assert ary[0:1].dims == (3, 1)
    assert ary[:].dims == (3, 2)

    with pytest.raises(ValueError):
        ary.view()[::2]

    with pytest.raises(DerankIndexOutOfBoundsError):
        ary[2]


def test_iteration():
    ary = dn.arange([2, 3])

    rows = list(ary)
    assert len(rows) == 3
    assert all(isinstance(row, ArrayView) for row in rows)
    assert [row.data.tolist() for row in rows] == [[0, 1], [2, 3], [4, 5]]

    assert [int(x) for x in ary[2]] == [4, 5]


def test_subviews():
    view = dn.arange([2, 1]).view()

    assert view.one_subview().data.tolist() == [0, 1]
    assert [sub.dims for sub in dn.arange([2, 3]).view().iter_subviews()] \
            == [(2,)] * 3

    with pytest.raises(Derank1DError):
        dn.arange([4]).view().one_subview()


def test_iter_chunks():
    data = np.arange(6)
    assert [chunk.tolist() for chunk in iter_chunks(data, 2)] == \
            [[0, 1], [2, 3], [4, 5]]

    view = dn.arange([2, 3]).view()
    assert [sub.data.tolist() for sub in view.iter_subviews()] == \
            [chunk.tolist() for chunk in iter_chunks(view.data, view.shape.stride)]


def test_into_base_round_trip():
    ary = dn.make_array([2, 3], np.linspace(0, 1, 6))

    assert ary.view().into_base() == ary
    assert ary.view() == ary.view()

    sub = ary.slice(1, 2).into_base()
    assert sub.dims == (2, 1)
    assert not np.shares_memory(sub.data, ary.data)


def test_view_truth_value_is_ambiguous():
    with pytest.raises(ValueError):
        bool(dn.arange([2]).view())


if __name__ == "__main__":
    if len(sys.argv) > 1:
        exec(sys.argv[1])
    else:
        from pytest import main
        main([__file__])

# vim: fdm=marker
