"""Stepping and measuring floating-point values in units in the last place.

Widths are given as a number of bits, as for the IEEE 754 binary formats:
16, 32, or 64. Values are always handed back as Python floats, so a
binary32 step is computed in binary32 and then promoted exactly.
"""

import math

import numpy as np


np_sorts = {
    16 : np.float16,
    32 : np.float32,
    64 : np.float64,
}

np_bitsorts = {
    16 : np.uint16,
    32 : np.uint32,
    64 : np.uint64,
}

def _npsort(sort):
    try:
        return np_sorts[sort]
    except KeyError:
        raise ValueError('unsupported float width {}, expecting 16, 32, or 64'.format(repr(sort)))


def round_to_sort(x, sort):
    """Round x to nearest in the given width, returned as a Python float."""
    if sort == 64:
        return float(x)
    with np.errstate(all='ignore'):
        return float(_npsort(sort)(x))

def next_up(x, sort=64):
    """The smallest value of width `sort` strictly greater than x."""
    if sort == 64:
        return math.nextafter(x, math.inf)
    npsort = _npsort(sort)
    with np.errstate(all='ignore'):
        return float(np.nextafter(npsort(x), npsort('+inf')))

def next_down(x, sort=64):
    """The largest value of width `sort` strictly less than x."""
    if sort == 64:
        return math.nextafter(x, -math.inf)
    npsort = _npsort(sort)
    with np.errstate(all='ignore'):
        return float(np.nextafter(npsort(x), npsort('-inf')))

def widen_down(x, n=1):
    """Step a binary64 value n ulps toward -inf."""
    for _ in range(n):
        x = math.nextafter(x, -math.inf)
    return x

def widen_up(x, n=1):
    """Step a binary64 value n ulps toward +inf."""
    for _ in range(n):
        x = math.nextafter(x, math.inf)
    return x


# 0.0 and -0.0 both map to 0
def to_ordinal(x, sort=64):
    """Position of x in the total order of finite values of width `sort`."""
    if math.isnan(x):
        raise ValueError('NaN has no ordinal: {}'.format(repr(x)))
    npsort = _npsort(sort)
    with np.errstate(all='ignore'):
        x_prime = npsort(x)
    bits = int(x_prime.view(np_bitsorts[sort]))
    magnitude = bits & ((1 << (sort - 1)) - 1)
    if bits >> (sort - 1):
        return -magnitude
    else:
        return magnitude

def ulps_between(x, y, sort=64):
    """Number of representable steps between x and y."""
    xz = to_ordinal(x, sort)
    yz = to_ordinal(y, sort)
    if xz < yz:
        return yz - xz
    else:
        return xz - yz

def ulp(x, sort=64):
    """Gap between |x| and the next value of larger magnitude."""
    if math.isnan(x):
        return math.nan
    if math.isinf(x):
        return math.inf
    x = abs(round_to_sort(x, sort))
    return next_up(x, sort) - x
