"""Arrays of flints, stored as numpy records.

A flint array is an ordinary numpy array with the record dtype
`FLINT_DTYPE`: three binary64 fields `lower`, `upper` and `tracked`, 24
bytes per element, aligned like a single double. The basic arithmetic and
comparisons are vectorized with numpy; any other operation can be mapped
over arrays elementwise with `apply()`.
"""

import logging

import numpy as np

from ..core import utils
from ..core.ops import arity
from . import evalctx
from .flint import Flint, flint_ops


logger = logging.getLogger(__name__)

FLINT_DTYPE = np.dtype([
    ('lower', np.float64),
    ('upper', np.float64),
    ('tracked', np.float64),
], align=True)

FIELDS = FLINT_DTYPE.names


def _is_flint_dtype(dt):
    if dt.names != FIELDS or dt.itemsize != FLINT_DTYPE.itemsize:
        return False
    for name in FIELDS:
        if dt.fields[name][:2] != FLINT_DTYPE.fields[name][:2]:
            return False
    return True

def _check(arr):
    if not isinstance(arr, np.ndarray):
        raise TypeError('expected a flint array: {}'.format(repr(arr)))
    if not _is_flint_dtype(arr.dtype):
        raise utils.LayoutError('expected an array with dtype {}, got {}'
                                .format(repr(FLINT_DTYPE), repr(arr.dtype)))
    return arr

def _coerce(x):
    """Flint array operand: flint arrays pass through, records and scalars
    become 0-d arrays that broadcast against anything."""
    if isinstance(x, np.ndarray):
        return _check(x)
    elif isinstance(x, np.void):
        if not _is_flint_dtype(x.dtype):
            raise utils.LayoutError('expected a record with dtype {}, got {}'
                                    .format(repr(FLINT_DTYPE), repr(x.dtype)))
        return np.array(x, dtype=FLINT_DTYPE)
    else:
        logger.debug('broadcasting scalar %r as a flint', x)
        return np.array(pack(x), dtype=FLINT_DTYPE)


#
#   Conversion
#

def pack(f):
    """Convert one flint (or number) to a FLINT_DTYPE record."""
    if not isinstance(f, Flint):
        f = Flint(f)
    return np.array((f.a, f.b, f.v), dtype=FLINT_DTYPE)[()]

def unpack(rec):
    """Convert one FLINT_DTYPE record (or 0-d array) to a Flint."""
    if not _is_flint_dtype(rec.dtype):
        raise utils.LayoutError('expected a record with dtype {}, got {}'
                                .format(repr(FLINT_DTYPE), repr(rec.dtype)))
    return Flint._from_fields(float(rec['lower']), float(rec['upper']), float(rec['tracked']))

def from_doubles(x):
    """Vectorized from_double: each value enclosed by one ulp on each side."""
    x = np.asarray(x, dtype=np.float64)
    out = np.empty(x.shape, dtype=FLINT_DTYPE)
    out['lower'] = np.nextafter(x, -np.inf)
    out['upper'] = np.nextafter(x, np.inf)
    out['tracked'] = x
    return out

def _from_narrow(x):
    npsort = x.dtype.type
    out = np.empty(x.shape, dtype=FLINT_DTYPE)
    out['lower'] = np.nextafter(x, npsort('-inf'))
    out['upper'] = np.nextafter(x, npsort('+inf'))
    out['tracked'] = x
    return out

def _from_numeric(x):
    kind = x.dtype.kind
    logger.debug('converting %s array of shape %s to flints', x.dtype, x.shape)
    if kind == 'f' and x.dtype.itemsize < 8:
        return _from_narrow(x)
    elif kind == 'f':
        return from_doubles(x.astype(np.float64))
    elif kind in 'iub':
        out = np.empty(x.shape, dtype=FLINT_DTYPE)
        for idx in np.ndindex(x.shape):
            out[idx] = pack(int(x[idx]))
        return out
    else:
        raise utils.LayoutError('cannot convert an array with dtype {} to flints'.format(repr(x.dtype)))

def asarray(data):
    """Build a flint array from a nested sequence of flints or numbers,
    or from a numeric array. Flint arrays are returned unchanged."""
    if isinstance(data, np.ndarray):
        if _is_flint_dtype(data.dtype):
            return data
        elif data.dtype.names is not None:
            raise utils.LayoutError('expected an array with dtype {}, got {}'
                                    .format(repr(FLINT_DTYPE), repr(data.dtype)))
        elif data.dtype.kind != 'O':
            return _from_numeric(data)

    objs = np.asarray(data, dtype=object)
    out = np.empty(objs.shape, dtype=FLINT_DTYPE)
    for idx in np.ndindex(objs.shape):
        out[idx] = pack(objs[idx])
    return out

def _tolist(x):
    if isinstance(x, np.ndarray):
        if x.ndim == 0:
            return unpack(x[()])
        return [_tolist(elt) for elt in x]
    else:
        return unpack(x)

def fromarray(arr):
    """Convert a flint array back to a nested list of Flints
    (or a single Flint, for a 0-d array)."""
    return _tolist(_check(arr))


#
#   Field views
#

def lower(arr):
    return _check(arr)['lower']

def upper(arr):
    return _check(arr)['upper']

def tracked(arr):
    return _check(arr)['tracked']

def width(arr):
    arr = _check(arr)
    return arr['upper'] - arr['lower']


#
#   Vectorized arithmetic
#

def _widen_down(x, n):
    for _ in range(n):
        x = np.nextafter(x, -np.inf)
    return x

def _widen_up(x, n):
    for _ in range(n):
        x = np.nextafter(x, np.inf)
    return x

def _nan_fields(x):
    return np.isnan(x['lower']) | np.isnan(x['upper']) | np.isnan(x['tracked'])

def _guard(a, b, *xs):
    # any NaN field in an operand makes the whole result NaN
    bad = np.zeros((), dtype=bool)
    for x in xs:
        bad = bad | _nan_fields(x)
    return np.where(bad, np.nan, a), np.where(bad, np.nan, b)

def _store(a, b, v, ctx, out):
    a, b, v = np.broadcast_arrays(a, b, v)
    bad = np.isnan(a) | np.isnan(b)
    a = np.where(bad, np.nan, a)
    b = np.where(bad, np.nan, b)
    v = np.where(bad, np.nan, v)
    if ctx.clamp_tracked:
        # a NaN tracked value fails both comparisons and is kept
        with np.errstate(invalid='ignore'):
            v = np.where(v < a, a, np.where(v > b, b, v))
    if out is None:
        out = np.empty(a.shape, dtype=FLINT_DTYPE)
    else:
        _check(out)
    out['lower'] = a
    out['upper'] = b
    out['tracked'] = v
    return out

def negative(x, out=None, ctx=None):
    ctx = evalctx.select_context(ctx)
    x = _coerce(x)
    a, b = _guard(-x['upper'], -x['lower'], x)
    return _store(a, b, -x['tracked'], ctx, out)

def add(x1, x2, out=None, ctx=None):
    ctx = evalctx.select_context(ctx)
    x1, x2 = _coerce(x1), _coerce(x2)
    with np.errstate(all='ignore'):
        a = _widen_down(x1['lower'] + x2['lower'], ctx.arith_ulps)
        b = _widen_up(x1['upper'] + x2['upper'], ctx.arith_ulps)
        v = x1['tracked'] + x2['tracked']
    a, b = _guard(a, b, x1, x2)
    return _store(a, b, v, ctx, out)

def subtract(x1, x2, out=None, ctx=None):
    ctx = evalctx.select_context(ctx)
    x1, x2 = _coerce(x1), _coerce(x2)
    with np.errstate(all='ignore'):
        a = _widen_down(x1['lower'] - x2['upper'], ctx.arith_ulps)
        b = _widen_up(x1['upper'] - x2['lower'], ctx.arith_ulps)
        v = x1['tracked'] - x2['tracked']
    a, b = _guard(a, b, x1, x2)
    return _store(a, b, v, ctx, out)

def _cross(fn, x1, x2, ctx):
    l1, u1 = x1['lower'], x1['upper']
    l2, u2 = x2['lower'], x2['upper']
    with np.errstate(all='ignore'):
        terms = np.stack(np.broadcast_arrays(fn(l1, l2), fn(l1, u2), fn(u1, l2), fn(u1, u2)))
        # fmin and fmax skip NaN terms such as 0 * inf
        a = _widen_down(np.fmin.reduce(terms, axis=0), ctx.arith_ulps)
        b = _widen_up(np.fmax.reduce(terms, axis=0), ctx.arith_ulps)
        v = fn(x1['tracked'], x2['tracked'])
    a, b = _guard(a, b, x1, x2)
    return a, b, v

def multiply(x1, x2, out=None, ctx=None):
    ctx = evalctx.select_context(ctx)
    x1, x2 = _coerce(x1), _coerce(x2)
    a, b, v = _cross(np.multiply, x1, x2, ctx)
    return _store(a, b, v, ctx, out)

def divide(x1, x2, out=None, ctx=None):
    """Vectorized division; divisors containing zero follow IEEE 754."""
    ctx = evalctx.select_context(ctx)
    x1, x2 = _coerce(x1), _coerce(x2)
    a, b, v = _cross(np.true_divide, x1, x2, ctx)
    return _store(a, b, v, ctx, out)


#
#   Vectorized comparison and classification
#

def equal(x1, x2):
    x1, x2 = _coerce(x1), _coerce(x2)
    ok = ~(_nan_fields(x1) | _nan_fields(x2))
    return ok & (x1['lower'] <= x2['upper']) & (x1['upper'] >= x2['lower'])

def not_equal(x1, x2):
    return ~equal(x1, x2)

def less(x1, x2):
    x1, x2 = _coerce(x1), _coerce(x2)
    ok = ~(_nan_fields(x1) | _nan_fields(x2))
    return ok & (x1['upper'] < x2['lower'])

def less_equal(x1, x2):
    x1, x2 = _coerce(x1), _coerce(x2)
    ok = ~(_nan_fields(x1) | _nan_fields(x2))
    return ok & (x1['lower'] <= x2['upper'])

def greater(x1, x2):
    x1, x2 = _coerce(x1), _coerce(x2)
    ok = ~(_nan_fields(x1) | _nan_fields(x2))
    return ok & (x1['lower'] > x2['upper'])

def greater_equal(x1, x2):
    x1, x2 = _coerce(x1), _coerce(x2)
    ok = ~(_nan_fields(x1) | _nan_fields(x2))
    return ok & (x1['upper'] >= x2['lower'])

def isnan(x):
    return _nan_fields(_coerce(x))

def isinf(x):
    x = _coerce(x)
    return np.isinf(x['lower']) | np.isinf(x['upper'])

def isfinite(x):
    x = _coerce(x)
    return np.isfinite(x['lower']) & np.isfinite(x['upper'])

def isnonzero(x):
    x = _coerce(x)
    return (x['lower'] > 0) | (x['upper'] < 0)


#
#   Elementwise application of any operation
#

def apply(op, *arrays, ctx=None):
    """Apply the operation `op` elementwise through the scalar flint core,
    broadcasting the arguments against each other."""
    if len(arrays) != arity(op):
        raise TypeError('{} takes {} arguments, got {}'.format(op.name, arity(op), len(arrays)))
    fn = flint_ops[op]
    args = np.broadcast_arrays(*(_coerce(x) for x in arrays))
    shape = args[0].shape
    out = np.empty(shape, dtype=FLINT_DTYPE)
    for idx in np.ndindex(shape):
        result = fn(*(unpack(arg[idx]) for arg in args), ctx=ctx)
        out[idx] = (result.a, result.b, result.v)
    logger.debug('applied %s over %d elements', op.name, out.size)
    return out
