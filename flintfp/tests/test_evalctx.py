# Tests for flint evaluation contexts

import pytest

from flintfp.arithmetic import evalctx
from flintfp.arithmetic.flint import Flint


class TestFlintCtx:

    def test_defaults(self):
        ctx = evalctx.FlintCtx()
        assert ctx.arith_ulps == 1
        assert ctx.libm_ulps == 2
        assert ctx.clamp_tracked is True
        assert ctx.props == {}

    def test_props(self):
        ctx = evalctx.FlintCtx(props={'arith-ulps': '3', 'libm-ulps': 4, 'tracked': 'free'})
        assert ctx.arith_ulps == 3
        assert ctx.libm_ulps == 4
        assert ctx.clamp_tracked is False
        assert ctx.props['arith-ulps'] == '3'

    @pytest.mark.parametrize('key', ['arith-ulps', 'arith_ulps', 'ARITH-ULPS'])
    def test_prop_synonyms(self, key):
        assert evalctx.FlintCtx(props={key: 0}).arith_ulps == 0

    @pytest.mark.parametrize('policy, clamp', [
        ('clamp', True), ('enclosed', True), ('Free', False), ('raw', False), (True, True), (False, False),
    ])
    def test_tracked_policy(self, policy, clamp):
        assert evalctx.FlintCtx(props={'tracked': policy}).clamp_tracked is clamp

    def test_keyword_overrides_props(self):
        ctx = evalctx.FlintCtx(props={'arith-ulps': 3}, arith_ulps=5)
        assert ctx.arith_ulps == 5

    def test_unknown_prop(self):
        with pytest.raises(ValueError, match='unsupported flint context property'):
            evalctx.FlintCtx(props={'precision': 53})

    @pytest.mark.parametrize('value', [-1, 'many', 1.5])
    def test_bad_ulps(self, value):
        with pytest.raises(ValueError):
            evalctx.FlintCtx(arith_ulps=value)
        with pytest.raises(ValueError):
            evalctx.FlintCtx(props={'libm-ulps': value})

    def test_bad_tracked(self):
        with pytest.raises(ValueError):
            evalctx.FlintCtx(props={'tracked': 'sometimes'})

    def test_repr_and_str(self):
        ctx = evalctx.FlintCtx(arith_ulps=2, clamp_tracked=False)
        assert repr(ctx) == 'FlintCtx(arith_ulps=2, libm_ulps=2, clamp_tracked=False)'
        assert 'tracked: free' in str(ctx)

    def test_class_props_untouched(self):
        evalctx.FlintCtx(props={'arith-ulps': 7})
        assert len(evalctx.FlintCtx.props) == 0


class TestLet:

    def test_let_copies(self):
        ctx = evalctx.FlintCtx(props={'libm-ulps': 3})
        newctx = ctx.let(arith_ulps=0)
        assert newctx is not ctx
        assert newctx.arith_ulps == 0
        assert newctx.libm_ulps == 3
        assert ctx.arith_ulps == 1

    def test_let_props(self):
        ctx = evalctx.FlintCtx()
        newctx = ctx.let(props={'tracked': 'free'})
        assert newctx.clamp_tracked is False
        assert ctx.clamp_tracked is True
        assert 'tracked' not in ctx.props
        assert newctx.props == {'tracked': 'free'}

    def test_let_validates(self):
        with pytest.raises(ValueError):
            evalctx.FlintCtx().let(libm_ulps=-2)


class TestSelectContext:

    def test_default(self):
        assert evalctx.select_context() is evalctx.default_ctx
        assert evalctx.select_context(None) is evalctx.default_ctx

    def test_explicit(self):
        ctx = evalctx.FlintCtx(arith_ulps=0)
        assert evalctx.select_context(ctx) is ctx

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            evalctx.select_context({'arith-ulps': 0})

    def test_operations_reject_wrong_type(self):
        with pytest.raises(TypeError):
            Flint(1).add(Flint(2), ctx='exact')


class TestContextInOperations:

    def test_libm_ulps(self):
        tight = evalctx.FlintCtx(libm_ulps=0)
        loose = evalctx.FlintCtx(libm_ulps=4)
        x = Flint(1)
        f = x.exp(ctx=tight)
        g = x.exp(ctx=loose)
        assert g.a < f.a <= f.b < g.b
        assert f.v == g.v

    def test_arith_ulps_ignored_by_libm(self):
        x = Flint.frombounds(1.0, 2.0)
        f = x.log(ctx=evalctx.FlintCtx(arith_ulps=0))
        g = x.log(ctx=evalctx.FlintCtx(arith_ulps=5))
        assert f.interval == g.interval

    def test_sqrt_uses_arith_ulps(self):
        f = Flint(4).sqrt(ctx=evalctx.FlintCtx(arith_ulps=0))
        assert f.interval == (2.0, 2.0)
