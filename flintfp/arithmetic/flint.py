"""Rounded floating-point intervals.

A flint pairs an ordinary binary64 value (the tracked value) with a lower
and upper bound that are guaranteed to enclose the exact real result of
the computation that produced it. Bounds are rounded outward by a few
ulps after every operation, so the rounding error of the hardware and of
the math library can never push the exact result outside.

Comparisons are by overlap: two flints are equal if their intervals
intersect, i.e. if they could represent the same real number.
"""

import math
import numbers
from enum import IntEnum, unique

import numpy as np

from ..core import gmpmath, libm, ulps
from ..core.ops import OP, RM, arity
from . import evalctx


@unique
class FlintOrder(IntEnum):
    """Classification of a `Flint` by comparison against a scalar value.
    See `Flint.classify()` for details."""
    STRICTLY_LESS     = -2
    LESS              = -1
    CONTAINS          = 0
    GREATER           = 1
    STRICTLY_GREATER  = 2


# largest magnitude below which every integer is exact in binary64
MAX_EXACT_INTEGER = 2 ** 53 - 1

# beyond this magnitude, argument reduction for sin and cos is not attempted
TRIG_REDUCTION_LIMIT = 2.0 ** 32

_NAN_FIELDS = (math.nan, math.nan, math.nan)


#
#   Conversion
#

def _integer_fields(n):
    if abs(n) <= MAX_EXACT_INTEGER:
        x = float(n)
        return x, x, x
    try:
        x = float(n)
    except OverflowError:
        x = math.inf if n > 0 else -math.inf
    return ulps.next_down(x), ulps.next_up(x), x

def _double_fields(x):
    if math.isnan(x):
        return _NAN_FIELDS
    return ulps.next_down(x), ulps.next_up(x), x

def _narrow_fields(x, sort):
    x = ulps.round_to_sort(x, sort)
    if math.isnan(x):
        return _NAN_FIELDS
    return ulps.next_down(x, sort), ulps.next_up(x, sort), x

def _fields_of(x):
    if isinstance(x, Flint):
        return x._a, x._b, x._v
    elif isinstance(x, (int, np.integer)):
        return _integer_fields(int(x))
    elif isinstance(x, np.float16):
        return _narrow_fields(x, 16)
    elif isinstance(x, np.float32):
        return _narrow_fields(x, 32)
    elif isinstance(x, numbers.Real):
        return _double_fields(float(x))
    else:
        raise TypeError('expected a flint or a real number: {}'.format(repr(x)))

def _is_operand(x):
    return isinstance(x, (Flint, numbers.Real, np.integer, np.floating))

def _operand(x):
    if isinstance(x, Flint):
        return x
    elif _is_operand(x):
        return Flint(x)
    else:
        raise TypeError('expected a flint or a real number: {}'.format(repr(x)))


def from_integer(n):
    """Convert an integer to a flint. Integers up to 2**53 - 1 in magnitude
    are exact; larger ones get one ulp on each side of their rounded value."""
    return Flint._from_fields(*_integer_fields(int(n)))

def from_double(x):
    """Convert a binary64 value to a flint, one ulp wide on each side."""
    return Flint._from_fields(*_double_fields(float(x)))

def from_float32(x):
    """Round x to binary32 and enclose it with one binary32 ulp on each side."""
    return Flint._from_fields(*_narrow_fields(x, 32))


#
#   Endpoint helpers
#

def _fmin(*xs):
    # like C fmin, NaN arguments are ignored unless all of them are NaN
    finite = [x for x in xs if not math.isnan(x)]
    if finite:
        return min(finite)
    else:
        return math.nan

def _fmax(*xs):
    finite = [x for x in xs if not math.isnan(x)]
    if finite:
        return max(finite)
    else:
        return math.nan

def _clamp(v, a, b):
    # comparisons with NaN are false, so a NaN tracked value passes through
    if v < a:
        return a
    elif v > b:
        return b
    else:
        return v

def _finish(a, b, v, ctx):
    if math.isnan(a) or math.isnan(b):
        return _NAN_FIELDS
    if ctx.clamp_tracked:
        v = _clamp(v, a, b)
    return a, b, v

def _any_nan(*fs):
    for f in fs:
        if math.isnan(f._a) or math.isnan(f._b) or math.isnan(f._v):
            return True
    return False

def _fold_abs(a, b):
    """Smallest and largest magnitude in [a, b]."""
    if b < 0:
        return -b, -a
    elif a < 0:
        return 0.0, max(-a, b)
    else:
        return a, b


#
#   Arithmetic
#

def _neg(x, ctx):
    if _any_nan(x):
        return _NAN_FIELDS
    return _finish(-x._b, -x._a, -x._v, ctx)

def _add(x, y, ctx):
    if _any_nan(x, y):
        return _NAN_FIELDS
    a = ulps.widen_down(x._a + y._a, ctx.arith_ulps)
    b = ulps.widen_up(x._b + y._b, ctx.arith_ulps)
    return _finish(a, b, x._v + y._v, ctx)

def _sub(x, y, ctx):
    if _any_nan(x, y):
        return _NAN_FIELDS
    a = ulps.widen_down(x._a - y._b, ctx.arith_ulps)
    b = ulps.widen_up(x._b - y._a, ctx.arith_ulps)
    return _finish(a, b, x._v - y._v, ctx)

def _mul(x, y, ctx):
    if _any_nan(x, y):
        return _NAN_FIELDS
    terms = (x._a * y._a, x._a * y._b, x._b * y._a, x._b * y._b)
    a = ulps.widen_down(_fmin(*terms), ctx.arith_ulps)
    b = ulps.widen_up(_fmax(*terms), ctx.arith_ulps)
    return _finish(a, b, x._v * y._v, ctx)

# a divisor containing zero is not guarded: the quotient follows IEEE 754
def _div(x, y, ctx):
    if _any_nan(x, y):
        return _NAN_FIELDS
    terms = (libm.div(x._a, y._a), libm.div(x._a, y._b),
             libm.div(x._b, y._a), libm.div(x._b, y._b))
    a = ulps.widen_down(_fmin(*terms), ctx.arith_ulps)
    b = ulps.widen_up(_fmax(*terms), ctx.arith_ulps)
    return _finish(a, b, libm.div(x._v, y._v), ctx)


#
#   Elementary function strategies
#

def _libm_ulps(op, ctx):
    return ctx.libm_ulps + libm.extra_ulps.get(op, 0)

def _monotonic_incr(fn, x, ctx, n):
    if _any_nan(x):
        return _NAN_FIELDS
    a = ulps.widen_down(fn(x._a), n)
    b = ulps.widen_up(fn(x._b), n)
    return _finish(a, b, fn(x._v), ctx)

def _monotonic_decr(fn, x, ctx, n):
    if _any_nan(x):
        return _NAN_FIELDS
    a = ulps.widen_down(fn(x._b), n)
    b = ulps.widen_up(fn(x._a), n)
    return _finish(a, b, fn(x._v), ctx)

def _domain_limited(fn, x, ctx, domain_min, edge, n):
    """Increasing function defined on [domain_min, inf), whose value at
    domain_min is edge. Parts of the interval below the domain are cut off."""
    if _any_nan(x) or x._b < domain_min:
        return _NAN_FIELDS
    if x._a < domain_min:
        a = edge
    else:
        a = max(ulps.widen_down(fn(x._a), n), edge)
    b = ulps.widen_up(fn(x._b), n)
    if x._v < domain_min:
        v = edge
    else:
        v = fn(x._v)
    return _finish(a, b, v, ctx)


def _fabs(x, ctx):
    if _any_nan(x):
        return _NAN_FIELDS
    a, b = _fold_abs(x._a, x._b)
    return _finish(a, b, abs(x._v), ctx)

def _pow(x, y, ctx):
    if _any_nan(x, y):
        return _NAN_FIELDS
    n = _libm_ulps(OP.pow, ctx)
    bases = [x._a, x._b]
    if x._a < 0 < x._b:
        # x ** p is not monotonic in x across zero
        bases.extend((0.0, -0.0))
    terms = [libm.pow(p, q) for p in bases for q in (y._a, y._b)]
    v = libm.pow(x._v, y._v)
    if math.isnan(v) or any(math.isnan(t) for t in terms):
        return _NAN_FIELDS
    a = ulps.widen_down(min(terms), n)
    b = ulps.widen_up(max(terms), n)
    return _finish(a, b, v, ctx)

def _hypot(x, y, ctx):
    if _any_nan(x, y):
        return _NAN_FIELDS
    n = _libm_ulps(OP.hypot, ctx)
    xmin, xmax = _fold_abs(x._a, x._b)
    ymin, ymax = _fold_abs(y._a, y._b)
    a = libm.hypot(xmin, ymin)
    if a != 0:
        a = max(ulps.widen_down(a, n), 0.0)
    b = ulps.widen_up(libm.hypot(xmax, ymax), n)
    return _finish(a, b, libm.hypot(x._v, y._v), ctx)


def _periodic(fn, x, ctx, n, maxima, minima):
    """sin or cos: bounded by the endpoint values, unless the interval
    reaches one of the extrema of the function."""
    if _any_nan(x):
        return _NAN_FIELDS
    a, b, v = x._a, x._b, x._v
    if (not (math.isfinite(a) and math.isfinite(b))
            or max(abs(a), abs(b)) > TRIG_REDUCTION_LIMIT
            or b - a >= TWO_PI._a):
        return _finish(-1.0, 1.0, fn(v), ctx)

    # reduce the lower bound into [0, 2pi), carrying the width along
    two_pi = TWO_PI._v
    k = math.floor(a / two_pi)
    da = a - k * two_pi
    db = da + (b - a)
    tol = 8 * ulps.ulp(max(abs(a), abs(b), two_pi))

    fa, fb = fn(a), fn(b)
    lo = max(ulps.widen_down(min(fa, fb), n), -1.0)
    hi = min(ulps.widen_up(max(fa, fb), n), 1.0)
    if any(da - tol <= p <= db + tol for p in maxima):
        hi = 1.0
    if any(da - tol <= p <= db + tol for p in minima):
        lo = -1.0
    return _finish(lo, hi, fn(v), ctx)

def _tan(x, ctx):
    if _any_nan(x):
        return _NAN_FIELDS
    n = _libm_ulps(OP.tan, ctx)
    a, b, v = x._a, x._b, x._v
    if not (math.isfinite(a) and math.isfinite(b)) or b - a >= PI._a:
        return _finish(-math.inf, math.inf, libm.tan(v), ctx)
    ta, tb = libm.tan(a), libm.tan(b)
    if ta > tb:
        # the interval crosses a pole
        return _finish(-math.inf, math.inf, libm.tan(v), ctx)
    lo = ulps.widen_down(ta, n)
    hi = ulps.widen_up(tb, n)
    return _finish(lo, hi, libm.tan(v), ctx)

def _asin(x, ctx):
    if _any_nan(x) or x._b < -1 or x._a > 1:
        return _NAN_FIELDS
    n = _libm_ulps(OP.asin, ctx)
    if x._a < -1:
        a = -HALF_PI._b
    else:
        a = max(ulps.widen_down(libm.asin(x._a), n), -HALF_PI._b)
    if x._b > 1:
        b = HALF_PI._b
    else:
        b = min(ulps.widen_up(libm.asin(x._b), n), HALF_PI._b)
    if x._v < -1:
        v = -HALF_PI._v
    elif x._v > 1:
        v = HALF_PI._v
    else:
        v = libm.asin(x._v)
    return _finish(a, b, v, ctx)

def _acos(x, ctx):
    if _any_nan(x) or x._b < -1 or x._a > 1:
        return _NAN_FIELDS
    n = _libm_ulps(OP.acos, ctx)
    if x._b > 1:
        a = 0.0
    else:
        a = max(ulps.widen_down(libm.acos(x._b), n), 0.0)
    if x._a < -1:
        b = PI._b
    else:
        b = min(ulps.widen_up(libm.acos(x._a), n), PI._b)
    if x._v < -1:
        v = PI._v
    elif x._v > 1:
        v = 0.0
    else:
        v = libm.acos(x._v)
    return _finish(a, b, v, ctx)

def _atanh(x, ctx):
    if _any_nan(x) or x._b < -1 or x._a > 1:
        return _NAN_FIELDS
    n = _libm_ulps(OP.atanh, ctx)
    if x._a < -1:
        a = -math.inf
    else:
        a = ulps.widen_down(libm.atanh(x._a), n)
    if x._b > 1:
        b = math.inf
    else:
        b = ulps.widen_up(libm.atanh(x._b), n)
    if x._v < -1:
        v = -math.inf
    elif x._v > 1:
        v = math.inf
    else:
        v = libm.atanh(x._v)
    return _finish(a, b, v, ctx)

def _cosh(x, ctx):
    if _any_nan(x):
        return _NAN_FIELDS
    n = _libm_ulps(OP.cosh, ctx)
    ca, cb = libm.cosh(x._a), libm.cosh(x._b)
    if x.classify(strict=True) == FlintOrder.CONTAINS:
        a = 1.0
    else:
        a = max(ulps.widen_down(min(ca, cb), n), 1.0)
    b = ulps.widen_up(max(ca, cb), n)
    return _finish(a, b, libm.cosh(x._v), ctx)

def _atan2(y, x, ctx):
    """Two-argument arctangent, split on the sign of each operand.
    Angles increase counterclockwise, so each region of the plane that
    avoids the origin has its extreme angles at two of its corners."""
    if _any_nan(y, x):
        return _NAN_FIELDS
    ya, yb, vy = y._a, y._b, y._v
    xa, xb, vx = x._a, x._b, x._v
    yclass = y.classify(strict=True)
    xclass = x.classify(strict=True)
    n = _libm_ulps(OP.atan2, ctx)
    v = libm.atan2(vy, vx)

    if yclass == FlintOrder.STRICTLY_GREATER:
        if xclass == FlintOrder.STRICTLY_GREATER:
            lo, hi = libm.atan2(ya, xb), libm.atan2(yb, xa)
        elif xclass == FlintOrder.CONTAINS:
            lo, hi = libm.atan2(ya, xb), libm.atan2(ya, xa)
        else:
            lo, hi = libm.atan2(yb, xb), libm.atan2(ya, xa)
    elif yclass == FlintOrder.STRICTLY_LESS:
        if xclass == FlintOrder.STRICTLY_GREATER:
            lo, hi = libm.atan2(ya, xa), libm.atan2(yb, xb)
        elif xclass == FlintOrder.CONTAINS:
            lo, hi = libm.atan2(yb, xa), libm.atan2(yb, xb)
        else:
            lo, hi = libm.atan2(yb, xa), libm.atan2(ya, xb)
    else:
        if xclass == FlintOrder.STRICTLY_GREATER:
            lo, hi = libm.atan2(ya, xa), libm.atan2(yb, xa)
        elif xclass == FlintOrder.CONTAINS:
            # the origin is inside the region
            return _finish(-PI._b, PI._b, v, ctx)
        else:
            # the region straddles the branch cut on the negative x axis;
            # the tracked y value picks which side the interval lives on
            lo_pos = libm.atan2(abs(yb), xb)
            hi_neg = libm.atan2(-abs(ya), xb)
            if math.copysign(1.0, vy) > 0:
                lo = ulps.widen_down(lo_pos, n)
                hi = ulps.widen_up(hi_neg + TWO_PI._b, n + ctx.arith_ulps)
            else:
                lo = ulps.widen_down(lo_pos - TWO_PI._b, n + ctx.arith_ulps)
                hi = ulps.widen_up(hi_neg, n)
            return _finish(lo, hi, v, ctx)

    return _finish(ulps.widen_down(lo, n), ulps.widen_up(hi, n), v, ctx)


#
#   Flint type
#

class Flint(object):
    """A rounded floating-point interval.

    `Flint(x)` encloses a single number: integers up to 2**53 - 1 are exact,
    binary32 and binary16 scalars are widened by one ulp of their own format,
    and any other real number by one binary64 ulp. Use `frombounds()` to
    build a flint from explicit bounds.

    Flints are values: every operation returns a new flint, except for the
    explicit in-place methods (`iadd`, `isub`, `imul`, `idiv`, `ipow`),
    which overwrite and return `self`. Augmented assignment (`+=` etc.)
    rebinds to a new flint.
    """

    __slots__ = ('_a', '_b', '_v')

    # overlap equality is not transitive, so no hash can agree with it
    __hash__ = None

    def __init__(self, x):
        self._a, self._b, self._v = _fields_of(x)

    @classmethod
    def _from_fields(cls, a, b, v):
        f = cls.__new__(cls)
        f._a = a
        f._b = b
        f._v = v
        return f

    @classmethod
    def frombounds(cls, a, b, v=None, ctx=None):
        """Construct the flint [a, b] with tracked value `v`, which defaults to
        the midpoint. NaN bounds give the NaN flint."""
        ctx = evalctx.select_context(ctx)
        a = float(a)
        b = float(b)
        if math.isnan(a) or math.isnan(b):
            return cls._from_fields(*_NAN_FIELDS)
        if a > b:
            raise ValueError('invalid interval: lower={}, upper={}'.format(repr(a), repr(b)))
        if v is None:
            v = 0.5 * a + 0.5 * b
            if math.isnan(v):
                # [-inf, inf]
                v = 0.0
            v = _clamp(v, a, b)
        else:
            v = float(v)
            if ctx.clamp_tracked and not (a <= v <= b):
                raise ValueError('tracked value {} outside of interval [{}, {}]'
                                 .format(repr(v), repr(a), repr(b)))
        return cls._from_fields(a, b, v)

    @classmethod
    def nan(cls):
        """The NaN flint, with all three fields NaN."""
        return cls._from_fields(*_NAN_FIELDS)

    # the internal state is not directly visible: expose it with properties

    @property
    def a(self):
        """The lower bound."""
        return self._a

    @property
    def b(self):
        """The upper bound."""
        return self._b

    @property
    def v(self):
        """The tracked value: a point estimate computed with ordinary
        round-to-nearest arithmetic."""
        return self._v

    lower = a
    upper = b
    tracked = v

    @property
    def interval(self):
        """The tuple (lower, upper)."""
        return self._a, self._b

    @property
    def width(self):
        """upper - lower."""
        return self._b - self._a

    eps = width

    def __repr__(self):
        return '{}(lower={}, upper={}, tracked={})'.format(
            type(self).__name__, repr(self._a), repr(self._b), repr(self._v)
        )

    def __str__(self):
        return str(self._v)

    def __reduce__(self):
        return (_reconstruct, (self._a, self._b, self._v))

    def __float__(self):
        return float(self._v)

    def __int__(self):
        return int(self._v)

    def __bool__(self):
        return self.isnonzero()

    # classification

    def isnan(self):
        """Is any of the three fields NaN?"""
        return math.isnan(self._a) or math.isnan(self._b) or math.isnan(self._v)

    def isinf(self):
        """Is either bound infinite?"""
        return math.isinf(self._a) or math.isinf(self._b)

    def isfinite(self):
        """Are both bounds finite?"""
        return math.isfinite(self._a) and math.isfinite(self._b)

    def isnonzero(self):
        """Does the interval lie strictly above or strictly below zero?"""
        return self._a > 0 or self._b < 0

    def contains(self, x):
        """Does the interval contain `x`?"""
        return self._a <= x <= self._b

    def classify(self, val=0.0, strict=False):
        """Classifies this flint by comparing against a value.
        By default, the flint can be `LESS`, `CONTAINS`, or `GREATER`
        where intervals with `val` as an endpoint are either `LESS` and `GREATER`.
        If `strict` is `True`, the flint can be `STRICTLY_LESS`, `CONTAINS`
        or `STRICTLY_GREATER` where intervals with `val` as an endpoint are classified
        as `CONTAINS`.
        """
        if strict:
            if self._b < val:
                return FlintOrder.STRICTLY_LESS
            elif self._a > val:
                return FlintOrder.STRICTLY_GREATER
            else:
                return FlintOrder.CONTAINS
        else:
            if self._b <= val:
                return FlintOrder.LESS
            elif self._a >= val:
                return FlintOrder.GREATER
            else:
                return FlintOrder.CONTAINS

    # comparison, by overlap of the intervals

    def eq(self, other):
        """Could `self` and `other` be equal? True if the intervals overlap."""
        other = _operand(other)
        if self.isnan() or other.isnan():
            return False
        return self._a <= other._b and self._b >= other._a

    def ne(self, other):
        """True if either side is NaN or the intervals are disjoint."""
        return not self.eq(other)

    def lt(self, other):
        """True if `self` lies entirely below `other`."""
        other = _operand(other)
        if self.isnan() or other.isnan():
            return False
        return self._b < other._a

    def le(self, other):
        other = _operand(other)
        if self.isnan() or other.isnan():
            return False
        return self._a <= other._b

    def gt(self, other):
        """True if `self` lies entirely above `other`."""
        other = _operand(other)
        if self.isnan() or other.isnan():
            return False
        return self._a > other._b

    def ge(self, other):
        other = _operand(other)
        if self.isnan() or other.isnan():
            return False
        return self._b >= other._a

    def __eq__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.eq(other)

    def __ne__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.ne(other)

    def __lt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.lt(other)

    def __le__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.le(other)

    def __gt__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.gt(other)

    def __ge__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.ge(other)

    # arithmetic

    def _result(self, fields):
        return type(self)._from_fields(*fields)

    def _assign(self, fields):
        self._a, self._b, self._v = fields
        return self

    def neg(self, ctx=None):
        """Negation, which is exact."""
        return self._result(_neg(self, evalctx.select_context(ctx)))

    def pos(self, ctx=None):
        return self._result(_finish(self._a, self._b, self._v, evalctx.select_context(ctx)))

    def add(self, other, ctx=None):
        return self._result(_add(self, _operand(other), evalctx.select_context(ctx)))

    def sub(self, other, ctx=None):
        return self._result(_sub(self, _operand(other), evalctx.select_context(ctx)))

    def mul(self, other, ctx=None):
        return self._result(_mul(self, _operand(other), evalctx.select_context(ctx)))

    def div(self, other, ctx=None):
        """Division. A divisor that contains zero gives infinite or NaN
        bounds, following IEEE 754; nothing is raised."""
        return self._result(_div(self, _operand(other), evalctx.select_context(ctx)))

    def pow(self, other, ctx=None):
        """`self` raised to the power `other`. If any corner of the two
        intervals has no real power (a negative base with a non-integer
        exponent), the result is NaN."""
        return self._result(_pow(self, _operand(other), evalctx.select_context(ctx)))

    # in-place variants overwrite self; the caller must own it exclusively

    def iadd(self, other, ctx=None):
        return self._assign(_add(self, _operand(other), evalctx.select_context(ctx)))

    def isub(self, other, ctx=None):
        return self._assign(_sub(self, _operand(other), evalctx.select_context(ctx)))

    def imul(self, other, ctx=None):
        return self._assign(_mul(self, _operand(other), evalctx.select_context(ctx)))

    def idiv(self, other, ctx=None):
        return self._assign(_div(self, _operand(other), evalctx.select_context(ctx)))

    def ipow(self, other, ctx=None):
        return self._assign(_pow(self, _operand(other), evalctx.select_context(ctx)))

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self.pos()

    def __abs__(self):
        return self.fabs()

    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Flint(other).add(self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Flint(other).sub(self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.mul(other)

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Flint(other).mul(self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.div(other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Flint(other).div(self)

    def __pow__(self, other, modulo=None):
        if modulo is not None:
            raise TypeError('pow() with a modulus is not supported for flints')
        if not _is_operand(other):
            return NotImplemented
        return self.pow(other)

    def __rpow__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return Flint(other).pow(self)

    # elementary functions

    def fabs(self, ctx=None):
        """Absolute value, which is exact."""
        return self._result(_fabs(self, evalctx.select_context(ctx)))

    def sqrt(self, ctx=None):
        """Square root. The part of the interval below zero is cut off,
        and an interval entirely below zero gives NaN."""
        ctx = evalctx.select_context(ctx)
        return self._result(_domain_limited(libm.sqrt, self, ctx, 0.0, 0.0, ctx.arith_ulps))

    def cbrt(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.cbrt, self, ctx, _libm_ulps(OP.cbrt, ctx)))

    def hypot(self, other, ctx=None):
        """sqrt(self**2 + other**2), without intermediate overflow."""
        return self._result(_hypot(self, _operand(other), evalctx.select_context(ctx)))

    def exp(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.exp, self, ctx, _libm_ulps(OP.exp, ctx)))

    def exp2(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.exp2, self, ctx, _libm_ulps(OP.exp2, ctx)))

    def expm1(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.expm1, self, ctx, _libm_ulps(OP.expm1, ctx)))

    def log(self, ctx=None):
        """Natural logarithm. A lower bound below zero becomes -inf."""
        ctx = evalctx.select_context(ctx)
        return self._result(_domain_limited(libm.log, self, ctx, 0.0, -math.inf, _libm_ulps(OP.log, ctx)))

    def log10(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_domain_limited(libm.log10, self, ctx, 0.0, -math.inf, _libm_ulps(OP.log10, ctx)))

    def log2(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_domain_limited(libm.log2, self, ctx, 0.0, -math.inf, _libm_ulps(OP.log2, ctx)))

    def log1p(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_domain_limited(libm.log1p, self, ctx, -1.0, -math.inf, _libm_ulps(OP.log1p, ctx)))

    def sin(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_periodic(libm.sin, self, ctx, _libm_ulps(OP.sin, ctx),
                                      _SIN_MAXIMA, _SIN_MINIMA))

    def cos(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_periodic(libm.cos, self, ctx, _libm_ulps(OP.cos, ctx),
                                      _COS_MAXIMA, _COS_MINIMA))

    def tan(self, ctx=None):
        """Tangent. An interval that crosses a pole gives (-inf, inf)."""
        return self._result(_tan(self, evalctx.select_context(ctx)))

    def asin(self, ctx=None):
        return self._result(_asin(self, evalctx.select_context(ctx)))

    def acos(self, ctx=None):
        return self._result(_acos(self, evalctx.select_context(ctx)))

    def atan(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.atan, self, ctx, _libm_ulps(OP.atan, ctx)))

    def atan2(self, other, ctx=None):
        """atan2(self, other), with `self` as the y coordinate. If the
        region crosses the negative x axis, the result is shifted by 2pi
        to stay on the side of the tracked y value."""
        return self._result(_atan2(self, _operand(other), evalctx.select_context(ctx)))

    def sinh(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.sinh, self, ctx, _libm_ulps(OP.sinh, ctx)))

    def cosh(self, ctx=None):
        """Hyperbolic cosine. An interval containing zero has lower bound 1."""
        return self._result(_cosh(self, evalctx.select_context(ctx)))

    def tanh(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.tanh, self, ctx, _libm_ulps(OP.tanh, ctx)))

    def asinh(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.asinh, self, ctx, _libm_ulps(OP.asinh, ctx)))

    def acosh(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_domain_limited(libm.acosh, self, ctx, 1.0, 0.0, _libm_ulps(OP.acosh, ctx)))

    def atanh(self, ctx=None):
        return self._result(_atanh(self, evalctx.select_context(ctx)))

    def erf(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_incr(libm.erf, self, ctx, _libm_ulps(OP.erf, ctx)))

    def erfc(self, ctx=None):
        ctx = evalctx.select_context(ctx)
        return self._result(_monotonic_decr(libm.erfc, self, ctx, _libm_ulps(OP.erfc, ctx)))


def _reconstruct(a, b, v):
    return Flint._from_fields(a, b, v)


#
#   Constants
#

def _constant_bounds(name):
    lo = gmpmath.to_float(gmpmath.compute_constant(name, prec=53, rm=RM.RTN))
    hi = gmpmath.to_float(gmpmath.compute_constant(name, prec=53, rm=RM.RTP))
    v = gmpmath.to_float(gmpmath.compute_constant(name, prec=53, rm=RM.RNE))
    return lo, hi, v

# scaling by a power of two is exact
_pi_a, _pi_b, _pi_v = _constant_bounds('PI')
PI = Flint._from_fields(_pi_a, _pi_b, _pi_v)
TWO_PI = Flint._from_fields(2 * _pi_a, 2 * _pi_b, 2 * _pi_v)
HALF_PI = Flint._from_fields(0.5 * _pi_a, 0.5 * _pi_b, 0.5 * _pi_v)

def _extrema(offset):
    # after reduction the interval starts in [0, 2pi) and is less than 2pi wide
    return tuple(offset + k * TWO_PI._v for k in range(-1, 3))

_SIN_MAXIMA = _extrema(HALF_PI._v)
_SIN_MINIMA = _extrema(3 * HALF_PI._v)
_COS_MAXIMA = _extrema(0.0)
_COS_MINIMA = _extrema(PI._v)


#
#   Dispatch by operation code
#

flint_ops = {
    OP.add : Flint.add,
    OP.sub : Flint.sub,
    OP.mul : Flint.mul,
    OP.div : Flint.div,
    OP.neg : Flint.neg,
    OP.pos : Flint.pos,
    OP.fabs : Flint.fabs,
    OP.sqrt : Flint.sqrt,
    OP.cbrt : Flint.cbrt,
    OP.hypot : Flint.hypot,
    OP.pow : Flint.pow,
    OP.exp : Flint.exp,
    OP.exp2 : Flint.exp2,
    OP.expm1 : Flint.expm1,
    OP.log : Flint.log,
    OP.log10 : Flint.log10,
    OP.log2 : Flint.log2,
    OP.log1p : Flint.log1p,
    OP.sin : Flint.sin,
    OP.cos : Flint.cos,
    OP.tan : Flint.tan,
    OP.asin : Flint.asin,
    OP.acos : Flint.acos,
    OP.atan : Flint.atan,
    OP.atan2 : Flint.atan2,
    OP.sinh : Flint.sinh,
    OP.cosh : Flint.cosh,
    OP.tanh : Flint.tanh,
    OP.asinh : Flint.asinh,
    OP.acosh : Flint.acosh,
    OP.atanh : Flint.atanh,
    OP.erf : Flint.erf,
    OP.erfc : Flint.erfc,
}

def compute(opcode, *args, ctx=None):
    """Apply the operation `opcode` to flint (or scalar) arguments."""
    try:
        fn = flint_ops[opcode]
    except KeyError:
        raise ValueError('unsupported operation {}'.format(repr(opcode)))
    if len(args) != arity(opcode):
        raise TypeError('{} takes {} arguments, got {}'.format(opcode.name, arity(opcode), len(args)))
    first, *rest = args
    return fn(_operand(first), *rest, ctx=ctx)
