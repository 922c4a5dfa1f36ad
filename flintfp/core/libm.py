"""Scalar IEEE 754 math on binary64.

Python's math module raises on domain errors and overflow (sqrt(-1),
exp(1000), 1/0.0, ...) where IEEE 754 returns NaN or an infinity.
Each function here evaluates with the math module, which goes straight to
the platform libm, and falls back to the corresponding numpy ufunc with
floating-point errors silenced when math raises. Every function returns a
Python float and never raises for numeric reasons.
"""

import math

import numpy as np

from .ops import OP


def _ieee(mathfn, npfn):
    def wrapped(*args):
        try:
            return mathfn(*args)
        except (OverflowError, ValueError, ZeroDivisionError):
            with np.errstate(all='ignore'):
                return float(npfn(*args))
    wrapped.__name__ = npfn.__name__
    wrapped.__doc__ = 'IEEE 754 {} on binary64, returning a Python float.'.format(npfn.__name__)
    return wrapped

def _true_divide(x1, x2):
    return x1 / x2

def _exp2(x):
    return math.pow(2.0, x)

div = _ieee(_true_divide, np.true_divide)
pow = _ieee(math.pow, np.power)
hypot = _ieee(math.hypot, np.hypot)
atan2 = _ieee(math.atan2, np.arctan2)

sqrt = _ieee(math.sqrt, np.sqrt)
cbrt = _ieee(math.cbrt, np.cbrt)
exp = _ieee(math.exp, np.exp)
exp2 = _ieee(_exp2, np.exp2)
expm1 = _ieee(math.expm1, np.expm1)
log = _ieee(math.log, np.log)
log10 = _ieee(math.log10, np.log10)
log2 = _ieee(math.log2, np.log2)
log1p = _ieee(math.log1p, np.log1p)

sin = _ieee(math.sin, np.sin)
cos = _ieee(math.cos, np.cos)
tan = _ieee(math.tan, np.tan)
asin = _ieee(math.asin, np.arcsin)
acos = _ieee(math.acos, np.arccos)
atan = _ieee(math.atan, np.arctan)

sinh = _ieee(math.sinh, np.sinh)
cosh = _ieee(math.cosh, np.cosh)
tanh = _ieee(math.tanh, np.tanh)
asinh = _ieee(math.asinh, np.arcsinh)
acosh = _ieee(math.acosh, np.arccosh)
atanh = _ieee(math.atanh, np.arctanh)

# numpy has no error function; math.erf and math.erfc are total on floats
erf = math.erf
erfc = math.erfc


libm_ops = {
    OP.add : lambda x1, x2: x1 + x2,
    OP.sub : lambda x1, x2: x1 - x2,
    OP.mul : lambda x1, x2: x1 * x2,
    OP.div : div,
    OP.neg : lambda x: -x,
    OP.pos : lambda x: x,
    OP.fabs : abs,
    OP.sqrt : sqrt,
    OP.cbrt : cbrt,
    OP.hypot : hypot,
    OP.pow : pow,
    OP.exp : exp,
    OP.exp2 : exp2,
    OP.expm1 : expm1,
    OP.log : log,
    OP.log10 : log10,
    OP.log2 : log2,
    OP.log1p : log1p,
    OP.sin : sin,
    OP.cos : cos,
    OP.tan : tan,
    OP.asin : asin,
    OP.acos : acos,
    OP.atan : atan,
    OP.atan2 : atan2,
    OP.sinh : sinh,
    OP.cosh : cosh,
    OP.tanh : tanh,
    OP.asinh : asinh,
    OP.acosh : acosh,
    OP.atanh : atanh,
    OP.erf : erf,
    OP.erfc : erfc,
}

# worst-case error of glibc, in ulps beyond the one every libm function is
# allowed; these are added to the libm widening of the context
extra_ulps = {
    OP.cbrt : 3,
    OP.log10 : 1,
    OP.sinh : 1,
    OP.cosh : 1,
    OP.tanh : 1,
    OP.asinh : 1,
    OP.acosh : 1,
    OP.atanh : 1,
    OP.erfc : 4,
}

def compute(opcode, *args):
    """Compute op(*args) in ordinary round-to-nearest binary64."""
    return libm_ops[opcode](*(float(arg) for arg in args))
