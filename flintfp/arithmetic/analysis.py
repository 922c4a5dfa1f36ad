"""Enclosure checking against an exact MPFR reference.

Each operation is evaluated with gmpy2 at sample points drawn from the
argument intervals, rounded once down and once up at high precision.
The flint result encloses the exact value at a sample point if the
rounded-down value is no smaller than its lower bound and the rounded-up
value is no larger than its upper bound.
"""

import itertools
import logging
import math

import gmpy2 as gmp

from ..core import gmpmath, utils
from ..core.ops import OP, arity
from .flint import Flint, compute


logger = logging.getLogger(__name__)


class Violation(object):
    """A sample point whose exact result escapes the computed interval."""

    def __init__(self, op, args, exact_lo, exact_hi, result):
        self.op = op
        self.args = args
        self.exact_lo = exact_lo
        self.exact_hi = exact_hi
        self.result = result

    def __repr__(self):
        return '{}(op={}, args={}, exact_lo={}, exact_hi={}, result={})'.format(
            type(self).__name__, repr(self.op), repr(self.args), repr(self.exact_lo),
            repr(self.exact_hi), repr(self.result)
        )

    def __str__(self):
        return '{}{} in [{}, {}], outside [{}, {}]'.format(
            self.op.name, self.args, str(self.exact_lo), str(self.exact_hi),
            repr(self.result.a), repr(self.result.b)
        )


def sample_points(f, interior=3):
    """Points of the interval `f` to check: both bounds, the tracked value,
    and `interior` evenly spaced points between the bounds.
    Non-finite points are skipped. Duplicates are removed."""
    a, b = f.a, f.b
    candidates = [a, b, f.v]
    if math.isfinite(a) and math.isfinite(b):
        width = b - a
        for i in range(1, interior + 1):
            x = a + width * i / (interior + 1)
            # rounding can step just outside the interval
            candidates.append(min(max(x, a), b))
    points = []
    for x in candidates:
        if math.isfinite(x) and a <= x <= b and x not in points:
            points.append(x)
    return points


def check_enclosure(op, result, *args, interior=3, prec=256):
    """Return the list of sample points where `result` fails to enclose
    the exact value of `op` applied to the arguments.

    A NaN result makes no claim about the exact values and always passes;
    so do sample points where the exact result is undefined.
    """
    if len(args) != arity(op):
        raise TypeError('{} takes {} arguments, got {}'.format(op.name, arity(op), len(args)))
    args = [a if isinstance(a, Flint) else Flint(a) for a in args]

    if result.isnan():
        logger.debug('%s: NaN result, nothing to check', op.name)
        return []

    lower = gmpmath.mpfr(result.a)
    upper = gmpmath.mpfr(result.b)
    # an angle across the branch cut may be reported one turn away
    # from the principal value
    if op == OP.atan2:
        turns = (0, 1, -1)
    else:
        turns = (0,)
    violations = []
    checked = 0
    for point in itertools.product(*(sample_points(f, interior=interior) for f in args)):
        exact_lo, exact_hi = gmpmath.bracket(op, *point, prec=prec)
        if gmp.is_nan(exact_lo) or gmp.is_nan(exact_hi):
            continue
        checked += 1
        if not any(lower <= lo and hi <= upper for lo, hi in
                   (gmpmath.shift_turns(exact_lo, exact_hi, k, prec=prec) for k in turns)):
            violation = Violation(op, point, exact_lo, exact_hi, result)
            logger.warning('enclosure violation: %s', violation)
            violations.append(violation)

    logger.debug('%s: checked %d points, %d violations', op.name, checked, len(violations))
    return violations

def assert_encloses(op, result, *args, interior=3, prec=256):
    """Raise EnclosureError if `result` does not enclose `op(*args)`
    at every sample point."""
    violations = check_enclosure(op, result, *args, interior=interior, prec=prec)
    if violations:
        raise utils.EnclosureError('{} failed to enclose {} of its sample points, first: {}'
                                   .format(op.name, len(violations), str(violations[0])))
    return result

def check_op(op, *args, ctx=None, interior=3, prec=256):
    """Compute `op` on flint arguments, then check the result."""
    result = compute(op, *args, ctx=ctx)
    return result, check_enclosure(op, result, *args, interior=interior, prec=prec)
