import math

import pytest
from scriptum.scriptum_errors import ArgTypeError, ArgValueError, ArityError, ReturnTypeError, ScriptumError
from scriptum.scriptum_guard import FIX, VAR, GuardedFunction, guard, guard_sum, required_params
from scriptum.scriptum_introspect import LOG
from scriptum.scriptum_runtime import is_guarded, set_guarded


def add(x, y):
    return x + y


def curried_add(x):
    def add_y(y):
        return x + y
    return add_y


# -----------------------------------------------------------------
# Arity
# -----------------------------------------------------------------

def test_fixed_arity_mismatch_raises(context):
    g = guard("add", add, context=context)
    with pytest.raises(ArityError) as e:
        g(1)
    msg = str(e.value)
    assert "add expects 2-ary Function" in msg
    assert "on the 1st call" in msg
    assert "but 1-ary Function received" in msg


def test_fixed_arity_rejects_extra_arguments(context):
    g = guard("add", add, context=context)
    with pytest.raises(ArityError):
        g(1, 2, 3)


def test_exact_arity_succeeds(context):
    assert guard("add", add, context=context)(1, 2) == 3


def test_keyword_arguments_count_towards_arity(context):
    g = guard("add", add, context=context)
    assert g(1, y=2) == 3
    assert context.history[0] == "add(Number, y=Number)"


def test_defaults_are_not_required(context):
    def greet(name, greeting="hi"):
        return f"{greeting} {name}"

    assert required_params(greet) == ("name",)
    assert guard("greet", greet, context=context)("bob") == "hi bob"


def test_variadic_prefix(context):
    g = guard("...total", lambda x, *xs: x + sum(xs), context=context)
    assert g.name == "total"
    assert g.params == VAR
    assert g(1, 2, 3) == 6
    with pytest.raises(ArityError, match="total expects at least 1-ary Function"):
        g()


def test_varargs_select_variadic_mode(context):
    def total(*xs):
        return sum(xs)

    assert guard("total", total, context=context).params == VAR
    assert guard("add", add, context=context).params == FIX
    assert guard("add", add, variadic=True, context=context).params == VAR


def test_uninspectable_builtin_skips_arity(context):
    assert guard("max", max, context=context)(1, 5, 3) == 5


# -----------------------------------------------------------------
# Argument and return types
# -----------------------------------------------------------------

def test_nan_argument_raises(context):
    g = guard("add", add, context=context)
    with pytest.raises(ArgTypeError) as e:
        g(1, math.nan)
    msg = str(e.value)
    assert "add received an argument of type NaN" in msg
    assert "in the 2nd argument" in msg


def test_undefined_keyword_argument_raises(context):
    g = guard("add", add, context=context)
    with pytest.raises(ArgTypeError, match="in the argument 'y'"):
        g(1, y=None)


def test_infinite_argument_raises(context):
    with pytest.raises(ArgTypeError, match="Infinity"):
        guard("neg", lambda x: -x, context=context)(math.inf)


def test_none_result_raises(context):
    def noop(x):
        pass

    with pytest.raises(ReturnTypeError) as e:
        guard("noop", noop, context=context)(1)
    assert "noop returned a value of type Undefined" in str(e.value)


def test_errors_share_a_common_base(context):
    with pytest.raises(ScriptumError):
        guard("add", add, context=context)(1)
    with pytest.raises(TypeError):
        guard("add", add, context=context)(1)


def test_container_with_nan_is_not_invalid(context):
    assert guard("first", lambda xs: xs[0], context=context)([1, math.nan]) == 1


# -----------------------------------------------------------------
# Curried chains
# -----------------------------------------------------------------

def test_curried_first_step_is_not_recorded(context):
    g = guard("add", curried_add, context=context)
    step = g(1)
    assert isinstance(step, GuardedFunction)
    assert step.name == "add_y"
    assert step.nth_call == 1
    assert step.meta[LOG] == ["add(Number)"]
    assert len(context.history) == 0

    assert step(2) == 3
    assert context.history.recent() == ["add(Number) -> add_y(Number)"]


def test_anonymous_continuation_inherits_name(context):
    step = guard("add", lambda x: lambda y: x + y, context=context)(1)
    assert step.name == "add"
    assert step(2) == 3
    assert context.history[0] == "add(Number) -> add(Number)"


def test_continuation_error_reports_call_log(context):
    step = guard("add", curried_add, context=context)(1)
    with pytest.raises(ArgTypeError) as e:
        step(math.nan)
    msg = str(e.value)
    assert "on the 2nd call" in msg
    assert "CALL LOG:\n\n[add(Number)]" in msg


def test_continuation_arity_is_checked(context):
    step = guard("add", curried_add, context=context)(1)
    with pytest.raises(ArityError, match="on the 2nd call"):
        step(2, 3)


def test_error_reports_recent_calls(context):
    g = guard("add", add, context=context)
    g(1, 2)
    g("a", "b")
    with pytest.raises(ArityError) as e:
        g(1)
    assert "RECENT CALLS:\n\nadd(String, String)\nadd(Number, Number)" in str(e.value)


def test_class_result_is_not_a_continuation(context):
    assert guard("make", lambda: dict, context=context)() is dict
    assert context.history[0] == "make()"


# -----------------------------------------------------------------
# History
# -----------------------------------------------------------------

def test_history_keeps_ten_most_recent(context):
    g = guard("ident", lambda x: x, context=context)
    for i in range(15):
        g([0] * i)
    assert len(context.history) == 10
    assert context.history[0] == "ident([Number])"
    assert context.history.recent(1) == ["ident([Number])"]


# -----------------------------------------------------------------
# Construction
# -----------------------------------------------------------------

def test_guard_as_decorator(context):
    @guard("inc", context=context)
    def inc(x):
        return x + 1

    assert isinstance(inc, GuardedFunction)
    assert inc(1) == 2
    assert inc.__wrapped__(1) == 2


def test_guard_validates_its_arguments(context):
    with pytest.raises(ArgTypeError, match="guard expects an argument of type String"):
        guard(1, add, context=context)
    with pytest.raises(ArgTypeError, match="guard expects an argument of type Function"):
        guard("add", 5, context=context)


def test_guarding_a_guarded_function_unwraps_it(context):
    inner = guard("add", add, context=context)
    outer = guard("plus", inner, context=context)
    assert outer.fn is add
    assert outer.name == "plus"


def test_context_guard_method(context):
    g = context.guard("add", add)
    assert g(1, 2) == 3
    assert g.context is context


# -----------------------------------------------------------------
# Global toggle
# -----------------------------------------------------------------

def test_disabled_guard_returns_function_unchanged(context):
    context.enabled = False
    assert guard("add", add, context=context) is add


def test_disabled_at_call_time_passes_through(context):
    g = guard("add", add, context=context)
    context.enabled = False
    assert math.isnan(g(1, math.nan))
    assert len(context.history) == 0


def test_set_guarded_toggles_default_context():
    set_guarded(False)
    assert not is_guarded()
    assert guard("add", add) is add
    assert math.isnan(guard("neg", lambda x: -x)(math.nan))
    set_guarded(True)
    assert isinstance(guard("add", add), GuardedFunction)


# -----------------------------------------------------------------
# Sum types
# -----------------------------------------------------------------

def test_guard_sum_runs_matching_case(context):
    run = guard_sum("Option", lambda cases: cases["Some"](1), ["Nothing", "Some"], context=context)
    assert run({"Nothing": 0, "Some": lambda x: x + 1}) == 2


def test_guard_sum_requires_every_case(context):
    run = guard_sum("Option", lambda cases: cases["Some"](1), ["Nothing", "Some"], context=context)
    with pytest.raises(ArgValueError) as e:
        run({"Some": lambda x: x})
    msg = str(e.value)
    assert "runOption expects an Object including the following cases" in msg
    assert "Nothing, Some" in msg
    assert "but Nothing was not received" in msg


def test_guard_sum_rejects_extra_cases(context):
    run = guard_sum("Option", lambda cases: 0, ["Nothing", "Some"], context=context)
    with pytest.raises(ArgValueError, match="but additionally Other received"):
        run({"Nothing": 0, "Some": 1, "Other": 2})


def test_guard_sum_requires_a_mapping(context):
    run = guard_sum("Option", lambda cases: 0, ["Nothing", "Some"], context=context)
    with pytest.raises(ArgTypeError, match="but \\[Number\\] received"):
        run([1])


def test_guard_sum_guards_function_results(context):
    run = guard_sum("Pair", lambda cases: cases["Pair"], ["Pair"], context=context)
    f = run({"Pair": lambda x: x})
    assert isinstance(f, GuardedFunction)
    assert f.name == "runPair"
    with pytest.raises(ArgTypeError):
        f(math.nan)


def test_guard_sum_disabled_returns_function(context):
    context.enabled = False
    fn = lambda cases: 0
    assert guard_sum("Option", fn, ["Nothing"], context=context) is fn


def test_guard_sum_disabled_at_call_time_passes_through(context):
    run = guard_sum("Option", lambda cases: cases, ["Nothing", "Some"], context=context)
    context.enabled = False
    assert run([1]) == [1]
