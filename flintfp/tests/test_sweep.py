# Randomized enclosure checks: every operation on many seeded intervals

import random

import pytest

from flintfp.arithmetic import analysis
from flintfp.arithmetic.flint import Flint, compute
from flintfp.core.ops import OP, arity


UNARY_COUNT = 200
BINARY_COUNT = 100


def random_flint(rng):
    """An interval around a center of magnitude 1e-3 to 1e2, with a width
    anywhere from a few ulps to about three times the center."""
    c = rng.choice((-1.0, 1.0)) * 10.0 ** rng.uniform(-3.0, 2.0)
    w = abs(c) * 10.0 ** rng.uniform(-12.0, 0.5)
    return Flint.frombounds(c - w / 2, c + w / 2, c)

def random_args(op, rng):
    while True:
        args = [random_flint(rng) for _ in range(arity(op))]
        # a divisor containing zero gives an unbounded quotient by IEEE 754
        if op == OP.div and args[1].a <= 0.0 <= args[1].b:
            continue
        return args


class TestSweep:

    @pytest.mark.parametrize('op', list(OP), ids=lambda op: op.name)
    def test_encloses(self, op):
        rng = random.Random(int(op))
        count = BINARY_COUNT if arity(op) == 2 else UNARY_COUNT
        for _ in range(count):
            args = random_args(op, rng)
            result = compute(op, *args)
            violations = analysis.check_enclosure(op, result, *args, interior=2)
            assert violations == [], str(violations[0])
            if not result.isnan():
                assert result.a <= result.v <= result.b
