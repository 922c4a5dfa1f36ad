from .core import utils, ops, ulps, libm, gmpmath
from .arithmetic import evalctx, flint, ndarray, analysis

Flint = flint.Flint
FlintOrder = flint.FlintOrder
FlintCtx = evalctx.FlintCtx

from_integer = flint.from_integer
from_double = flint.from_double
from_float32 = flint.from_float32

PI = flint.PI
TWO_PI = flint.TWO_PI
HALF_PI = flint.HALF_PI

FLINT_DTYPE = ndarray.FLINT_DTYPE
