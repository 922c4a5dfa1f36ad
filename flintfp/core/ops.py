"""Standard operation codes, shared by the scalar core, the array layer,
and the reference oracle."""

from enum import IntEnum, unique

class RM(IntEnum):
    ROUND_NEAREST_EVEN = 0
    RNE = 0
    ROUND_UP = 2
    RTP = 2
    ROUND_DOWN = 3
    RTN = 3

@unique
class OP(IntEnum):
    add = 0
    sub = 1
    mul = 2
    div = 3
    neg = 4
    sqrt = 5
    pos = 6
    fabs = 7
    cbrt = 8
    hypot = 9
    pow = 10
    exp = 11
    exp2 = 12
    expm1 = 13
    log = 14
    log10 = 15
    log2 = 16
    log1p = 17
    sin = 18
    cos = 19
    tan = 20
    asin = 21
    acos = 22
    atan = 23
    atan2 = 24
    sinh = 25
    cosh = 26
    tanh = 27
    asinh = 28
    acosh = 29
    atanh = 30
    erf = 31
    erfc = 32

# number of operands taken by each operation
BINARY_OPS = frozenset((OP.add, OP.sub, OP.mul, OP.div, OP.hypot, OP.pow, OP.atan2))

def arity(op):
    return 2 if op in BINARY_OPS else 1
