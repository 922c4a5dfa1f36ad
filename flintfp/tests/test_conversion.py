# Tests for building flints from scalars and reading them back

import copy
import math
import pickle
import sys

import numpy as np
import pytest

from flintfp.arithmetic import evalctx
from flintfp.arithmetic.flint import (
    Flint, from_integer, from_double, from_float32, MAX_EXACT_INTEGER,
)


class TestFromInteger:
    """Integers are exact up to 2**53 - 1, and one ulp wide beyond."""

    @pytest.mark.parametrize('n', [0, 1, -1, 12345, -(2 ** 40), MAX_EXACT_INTEGER, -MAX_EXACT_INTEGER])
    def test_exact(self, n):
        f = from_integer(n)
        assert f.a == f.b == f.v == float(n)

    def test_beyond_exact_range(self):
        n = 2 ** 53 + 1
        f = from_integer(n)
        assert f.v == float(n)
        assert f.a < f.b
        assert f.a <= n <= f.b
        assert f.a == math.nextafter(float(n), -math.inf)
        assert f.b == math.nextafter(float(n), math.inf)

    def test_overflow_positive(self):
        f = from_integer(10 ** 400)
        assert f.a == sys.float_info.max
        assert f.b == math.inf
        assert f.v == math.inf

    def test_overflow_negative(self):
        f = from_integer(-10 ** 400)
        assert f.a == -math.inf
        assert f.b == -sys.float_info.max

    def test_numpy_integer(self):
        f = Flint(np.int64(7))
        assert f.interval == (7.0, 7.0)

    def test_bool(self):
        assert Flint(True).interval == (1.0, 1.0)


class TestFromDouble:

    @pytest.mark.parametrize('x', [0.1, -0.1, 1.0, 1e-300, 5e-324, 1.7976931348623157e308, -2.5, 0.0])
    def test_encloses_and_tracks(self, x):
        f = from_double(x)
        assert f.a < x < f.b
        assert f.v == x
        assert f.a == math.nextafter(x, -math.inf)
        assert f.b == math.nextafter(x, math.inf)

    def test_infinity(self):
        f = from_double(math.inf)
        assert f.a == sys.float_info.max
        assert f.b == math.inf

    def test_nan(self):
        f = from_double(math.nan)
        assert f.isnan()
        assert math.isnan(f.a) and math.isnan(f.b) and math.isnan(f.v)

    def test_constructor_dispatch(self):
        f = Flint(0.1)
        g = from_double(0.1)
        assert (f.a, f.b, f.v) == (g.a, g.b, g.v)

    def test_numpy_float64(self):
        f = Flint(np.float64(0.25))
        assert f.v == 0.25
        assert f.a < 0.25 < f.b


class TestFromFloat32:

    def test_rounds_then_widens(self):
        f = from_float32(0.1)
        x32 = np.float32(0.1)
        assert f.v == float(x32)
        assert f.a == float(np.nextafter(x32, np.float32('-inf')))
        assert f.b == float(np.nextafter(x32, np.float32('+inf')))
        assert f.a < 0.1 < f.b

    def test_constructor_dispatch(self):
        f = Flint(np.float32(1.5))
        assert f.v == 1.5
        assert f.a == 1.5 - 2.0 ** -23
        assert f.b == 1.5 + 2.0 ** -23

    def test_float16(self):
        f = Flint(np.float16(0.5))
        assert f.v == 0.5
        assert f.a == 0.5 - 2.0 ** -12
        assert f.b == 0.5 + 2.0 ** -11


class TestFromBounds:

    def test_midpoint_default(self):
        f = Flint.frombounds(1, 2)
        assert f.interval == (1.0, 2.0)
        assert f.v == 1.5

    def test_explicit_tracked(self):
        f = Flint.frombounds(0.0, 1.0, 0.25)
        assert f.v == 0.25

    def test_infinite_bounds(self):
        f = Flint.frombounds(-math.inf, math.inf)
        assert f.v == 0.0
        g = Flint.frombounds(-math.inf, 3.0)
        assert g.a <= g.v <= g.b

    def test_inverted_raises(self):
        with pytest.raises(ValueError, match='invalid interval'):
            Flint.frombounds(2.0, 1.0)

    def test_tracked_outside_raises(self):
        with pytest.raises(ValueError):
            Flint.frombounds(0.0, 1.0, 3.0)

    def test_tracked_outside_allowed_when_free(self):
        ctx = evalctx.FlintCtx(props={'tracked': 'free'})
        f = Flint.frombounds(0.0, 1.0, 3.0, ctx=ctx)
        assert f.v == 3.0

    def test_nan_bounds(self):
        assert Flint.frombounds(math.nan, 1.0).isnan()

    def test_nan_constructor(self):
        f = Flint.nan()
        assert f.isnan()


class TestObjectSurface:

    def test_properties(self):
        f = Flint.frombounds(1.0, 3.0, 2.5)
        assert f.lower == f.a == 1.0
        assert f.upper == f.b == 3.0
        assert f.tracked == f.v == 2.5
        assert f.interval == (1.0, 3.0)
        assert f.width == 2.0
        assert f.eps == 2.0

    def test_float_and_int(self):
        f = Flint.frombounds(1.0, 3.0, 2.75)
        assert float(f) == 2.75
        assert int(f) == 2
        assert int(Flint(-2.5)) == -2

    def test_int_of_nan_raises(self):
        with pytest.raises(ValueError):
            int(Flint.nan())

    def test_bool_is_nonzero(self):
        assert bool(Flint(1))
        assert not bool(Flint(0))
        assert not bool(Flint.frombounds(-1.0, 1.0, 0.5))

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Flint(1))

    def test_repr(self):
        f = Flint.frombounds(1.0, 2.0, 1.5)
        assert repr(f) == 'Flint(lower=1.0, upper=2.0, tracked=1.5)'
        assert str(f) == '1.5'

    def test_not_a_number_raises(self):
        with pytest.raises(TypeError):
            Flint('1.0')
        with pytest.raises(TypeError):
            Flint(None)

    def test_copy_constructor(self):
        f = Flint(0.1)
        g = Flint(f)
        assert g is not f
        assert (g.a, g.b, g.v) == (f.a, f.b, f.v)


class TestPickle:

    @pytest.mark.parametrize('f', [
        Flint(0.1),
        Flint(2 ** 60),
        Flint.frombounds(-math.inf, 1.0, 0.5),
        Flint.frombounds(5e-324, 1e308, 1.0),
    ])
    def test_round_trip(self, f):
        g = pickle.loads(pickle.dumps(f))
        assert type(g) is Flint
        assert (g.a, g.b, g.v) == (f.a, f.b, f.v)

    def test_round_trip_nan(self):
        g = pickle.loads(pickle.dumps(Flint.nan()))
        assert g.isnan()

    def test_copy(self):
        f = Flint(0.3)
        g = copy.copy(f)
        h = copy.deepcopy(f)
        assert (g.a, g.b, g.v) == (h.a, h.b, h.v) == (f.a, f.b, f.v)
