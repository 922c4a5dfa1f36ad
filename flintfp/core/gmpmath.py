"""Common arithmetic operations (+-*/ sqrt log exp etc.)
implemented with GMP as a backend, with directed rounding.

This is the exact reference for the flint core: evaluating an operation
once rounded down and once rounded up brackets the real result, so a
flint bound can be checked against it without any error analysis.
"""


import math

import gmpy2 as gmp

from .ops import OP, RM


_gmp_rm = {
    RM.RNE : gmp.RoundToNearest,
    RM.RTP : gmp.RoundUp,
    RM.RTN : gmp.RoundDown,
}

def _context(prec, rm=RM.RNE, trap_inexact=False):
    return gmp.context(
        precision=prec,
        emin=gmp.get_emin_min(),
        emax=gmp.get_emax_max(),
        subnormalize=False,
        # overflow and invalid results are expected: sqrt(-1), exp(1e300), ...
        trap_underflow=False,
        trap_overflow=False,
        trap_inexact=trap_inexact,
        trap_invalid=False,
        trap_erange=False,
        trap_divzero=False,
        round=_gmp_rm[rm],
    )


def mpfr(x, prec=53):
    """Exact conversion of a binary64 value (or int) to an MPFR.
    Traps if the conversion would round, which cannot happen for floats
    when prec >= 53.
    """
    if isinstance(x, float):
        if math.isnan(x):
            return gmp.nan()
        elif math.isinf(x):
            return gmp.inf(-1 if x < 0 else 1)
        prec = max(prec, 53)
    elif isinstance(x, int):
        prec = max(prec, abs(x).bit_length())
    with _context(prec, trap_inexact=True):
        return gmp.mpfr(x)


def _pow(x1, x2):
    return x1 ** x2

gmp_ops = {
    OP.add : gmp.add,
    OP.sub : gmp.sub,
    OP.mul : gmp.mul,
    OP.div : gmp.div,
    OP.neg : lambda x: -x,
    OP.pos : lambda x: +x,
    OP.fabs : lambda x: abs(x),
    OP.sqrt : gmp.sqrt,
    OP.cbrt : gmp.cbrt,
    OP.hypot : gmp.hypot,
    OP.pow : _pow,
    OP.exp : gmp.exp,
    OP.exp2 : gmp.exp2,
    OP.expm1 : gmp.expm1,
    OP.log : gmp.log,
    OP.log10 : gmp.log10,
    OP.log2 : gmp.log2,
    OP.log1p : gmp.log1p,
    OP.sin : gmp.sin,
    OP.cos : gmp.cos,
    OP.tan : gmp.tan,
    OP.asin : gmp.asin,
    OP.acos : gmp.acos,
    OP.atan : gmp.atan,
    OP.atan2 : gmp.atan2,
    OP.sinh : gmp.sinh,
    OP.cosh : gmp.cosh,
    OP.tanh : gmp.tanh,
    OP.asinh : gmp.asinh,
    OP.acosh : gmp.acosh,
    OP.atanh : gmp.atanh,
    OP.erf : gmp.erf,
    OP.erfc : gmp.erfc,
}


def compute(opcode, *args, prec=256, rm=RM.RNE):
    """Compute op(*args), rounded in direction rm to prec bits.
    Arguments are binary64 values and are treated as exact.
    NOTE: this function does not trap on invalid operations, so it will give
    the MPFR answer for special cases like sqrt(-1), arcsin(3), and so on.
    """
    op = gmp_ops[opcode]
    inputs = [mpfr(arg) for arg in args]
    # gmpy2 really doesn't like it when you pass nan as an argument
    for f in inputs:
        if gmp.is_nan(f):
            return gmp.nan()
    with _context(prec, rm=rm):
        return op(*inputs)

def bracket(opcode, *args, prec=256):
    """Return (lo, hi) with lo <= op(*args) <= hi for the exact real result.
    Both are NaN if the result is undefined.
    """
    lo = compute(opcode, *args, prec=prec, rm=RM.RTN)
    hi = compute(opcode, *args, prec=prec, rm=RM.RTP)
    return lo, hi


def shift_turns(lo, hi, turns, prec=256):
    """Shift the bracket (lo, hi) by `turns` multiples of 2pi, keeping
    it a bracket: the lower end is rounded down and the upper end up."""
    if turns == 0:
        return lo, hi
    with _context(prec, rm=RM.RTN):
        pi_lo = gmp.const_pi()
    with _context(prec, rm=RM.RTP):
        pi_hi = gmp.const_pi()
    with _context(prec, rm=RM.RTN):
        new_lo = lo + (2 * turns) * (pi_lo if turns > 0 else pi_hi)
    with _context(prec, rm=RM.RTP):
        new_hi = hi + (2 * turns) * (pi_hi if turns > 0 else pi_lo)
    return new_lo, new_hi


gmp_constants = {
    'PI' : gmp.const_pi,
    'E' : lambda: gmp.exp(1),
    'LN2' : gmp.const_log2,
}

def compute_constant(name, prec=53, rm=RM.RNE):
    """Compute a named constant, rounded in direction rm to prec bits."""
    try:
        fn = gmp_constants[name]
    except KeyError:
        raise ValueError('unknown constant {}'.format(repr(name)))
    with _context(prec, rm=rm):
        return fn()


def to_float(x):
    """Convert an MPFR with at most 53 bits of precision to a Python float."""
    return float(x)
