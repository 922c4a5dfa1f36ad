"""Evaluation context information for flint arithmetic."""

from ..core import utils


clamp_synonyms = {'clamp', 'clamped', 'bounded', 'enclosed'}
free_synonyms = {'free', 'unclamped', 'drift', 'raw'}

arith_ulps_synonyms = {'arith-ulps', 'arith_ulps', 'arithulps'}
libm_ulps_synonyms = {'libm-ulps', 'libm_ulps', 'libmulps'}
tracked_synonyms = {'tracked', 'tracked-value', 'tracked_value'}


def _parse_ulps(name, value):
    try:
        n = int(str(value))
    except ValueError:
        raise ValueError('unsupported {} {}, expecting a non-negative integer'.format(name, repr(value)))
    if n < 0:
        raise ValueError('unsupported {} {}, expecting a non-negative integer'.format(name, repr(value)))
    return n

def _parse_tracked(value):
    if isinstance(value, bool):
        return value
    s = str(value).lower()
    if s in clamp_synonyms:
        return True
    elif s in free_synonyms:
        return False
    else:
        raise ValueError('unsupported tracked value policy {}'.format(repr(value)))


class FlintCtx(object):
    """Context for rounded floating-point interval arithmetic.

    `arith_ulps` is the outward widening, in binary64 ulps, applied to the
    bounds of correctly rounded operations (+ - * / sqrt).
    `libm_ulps` is the widening applied to results of the math library
    (exp, log, sin, pow, ...): one ulp for the endpoint's own rounding and
    one for the library's approximation error by default. Raise it on a
    platform whose libm is less accurate.
    `clamp_tracked` keeps the tracked value inside [lower, upper] after
    every operation; without it the tracked value may drift out after
    domain clamps.

    Contexts should be treated as immutable; use `let()` to derive a
    modified copy.
    """

    arith_ulps = 1
    libm_ulps = 2
    clamp_tracked = True

    # this placeholder should never have anything put in it
    props = utils.ImmutableDict()

    def __init__(self, props=None, arith_ulps=None, libm_ulps=None, clamp_tracked=None):
        self.props = {}
        if props:
            self._update_props(props)

        # arguments are allowed to override properties
        self._update_fields(arith_ulps=arith_ulps, libm_ulps=libm_ulps, clamp_tracked=clamp_tracked)

    def _update_props(self, props):
        for k, v in props.items():
            key = str(k).lower()
            if key in arith_ulps_synonyms:
                self.arith_ulps = _parse_ulps('arith-ulps', v)
            elif key in libm_ulps_synonyms:
                self.libm_ulps = _parse_ulps('libm-ulps', v)
            elif key in tracked_synonyms:
                self.clamp_tracked = _parse_tracked(v)
            else:
                raise ValueError('unsupported flint context property {}'.format(repr(k)))
        self.props.update(props)

    def _update_fields(self, arith_ulps=None, libm_ulps=None, clamp_tracked=None):
        if arith_ulps is not None:
            self.arith_ulps = _parse_ulps('arith-ulps', arith_ulps)
        if libm_ulps is not None:
            self.libm_ulps = _parse_ulps('libm-ulps', libm_ulps)
        if clamp_tracked is not None:
            self.clamp_tracked = _parse_tracked(clamp_tracked)

    def _import_fields(self, ctx):
        self.arith_ulps = ctx.arith_ulps
        self.libm_ulps = ctx.libm_ulps
        self.clamp_tracked = ctx.clamp_tracked

    def __repr__(self):
        return '{}(arith_ulps={}, libm_ulps={}, clamp_tracked={})'.format(
            type(self).__name__, repr(self.arith_ulps), repr(self.libm_ulps), repr(self.clamp_tracked)
        )

    def __str__(self):
        return '\n'.join([
            type(self).__name__ + ':',
            '    arith_ulps: ' + str(self.arith_ulps),
            '    libm_ulps: ' + str(self.libm_ulps),
            '    tracked: ' + ('clamp' if self.clamp_tracked else 'free'),
        ])

    def let(self, props=None, arith_ulps=None, libm_ulps=None, clamp_tracked=None):
        """Create a new context, updated with any provided properties
        or keyword overrides.
        """
        cls = type(self)
        newctx = cls.__new__(cls)
        newctx._import_fields(self)
        newctx.props = self.props.copy()

        if props:
            newctx._update_props(props)
        newctx._update_fields(arith_ulps=arith_ulps, libm_ulps=libm_ulps, clamp_tracked=clamp_tracked)
        return newctx



default_ctx = FlintCtx()

def select_context(ctx=None):
    """The context to use for an operation: the provided one, or the default."""
    if ctx is None:
        return default_ctx
    elif isinstance(ctx, FlintCtx):
        return ctx
    else:
        raise TypeError('expected a FlintCtx: ctx={}'.format(repr(ctx)))
