#!/usr/bin/env python

import io
import logging

import numpy as np

import densor as dn


logging.basicConfig(level=logging.INFO)

a = dn.ArrayBase.from_numpy(np.arange(8).reshape(2, 2, 2))
b = dn.make_array([1, 2], [0, 1])


# {{{ broadcasting

dn.set_debug_enabled(True)
logging.getLogger("densor.traversal").setLevel(logging.DEBUG)

prod = a * b
assert prod.data.tolist() == [0, 0, 2, 3, 0, 0, 6, 7]
assert np.array_equal(prod.to_numpy(), a.to_numpy() * b.to_numpy())
print(prod)

dn.set_debug_enabled(False)

# }}}


# {{{ zero-copy views

view = a.slice(1, 2).derank(0)
print(view)
assert view.dims == (2, 2)
assert np.shares_memory(view.data, a.data)

# }}}


# {{{ matrix products

m = dn.ArrayBase.from_nested([[1., 2.], [3., 4.]])
print(m @ m)
assert np.allclose((m @ m).to_numpy(), m.to_numpy() @ m.to_numpy())

# }}}


# {{{ IDX round trip

buf = io.BytesIO()
dn.write_idx(prod.astype(dn.INT16), buf)
buf.seek(0)
print(dn.read_idx(buf, dtype=dn.INT16, ndims=3))

# }}}

# vim: fdm=marker
