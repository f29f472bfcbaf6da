import pytest
from scriptum.scriptum_errors import ArgTypeError, ArityError, OverloadError
from scriptum.scriptum_overload import BinaryOverload, Overload, dispatcher, dispatcher2, overload, overload2


def add(x, y):
    return x + y


@pytest.fixture
def size(context):
    op = overload("size", context=context)
    op.register("Array", lambda xs: len(xs))
    op.register("String", lambda s: len(s))
    return op


def test_dispatch_on_type_tag(size):
    assert isinstance(size, Overload)
    assert size([1, 2, 3]) == 3
    assert size("ab") == 2


def test_unknown_key_raises(size):
    with pytest.raises(OverloadError) as e:
        size(1)
    msg = str(e.value)
    assert "invalid overloaded function call" in msg
    assert 'size cannot dispatch on "Number"' in msg
    assert "for the given value of type Number" in msg


def test_overload_error_is_a_lookup_error(size):
    with pytest.raises(LookupError):
        size(1.5)


def test_last_registration_wins(size):
    size.register("Array", lambda xs: -1)
    assert size([1]) == -1


def test_register_returns_the_instance_table(context):
    zero = overload("zero", context=context)
    assert zero.register("Number", 0) == {"Number": 0}
    assert zero.register("String", "") == {"Number": 0, "String": ""}


def test_plain_value_instances_are_returned(context):
    zero = overload("zero", context=context)
    zero.register("Number", 0)
    assert zero(42) == 0


def test_register_is_guarded(size):
    with pytest.raises(ArityError, match="sizeAdd expects 2-ary Function"):
        size.register("Array")


def test_calls_are_recorded(size, context):
    size([1, 2])
    assert context.history[0] == "size([Number])"


def test_membership_and_keys(size):
    assert "Array" in size
    assert "Number" not in size
    assert set(size.keys()) == {"Array", "String"}


def test_custom_dispatch(context):
    parity = overload("parity", lambda n: "even" if n % 2 == 0 else "odd", context=context)
    parity.register("even", "E")
    parity.register("odd", "O")
    assert parity(2) == "E"
    assert parity(3) == "O"


def test_unhashable_key_raises_overload_error(context):
    op = overload("op", lambda x: [x], context=context)
    with pytest.raises(OverloadError, match="op cannot dispatch on \\[1\\]"):
        op(1)


def test_declaration_is_validated(context):
    with pytest.raises(ArgTypeError, match="overload expects an argument of type String"):
        overload(1, context=context)
    with pytest.raises(ArgTypeError, match="in the 2nd argument"):
        overload("op", 5, context=context)


def test_dispatcher_uses_function_names():
    assert dispatcher(add) == "add"
    assert dispatcher(lambda: 0) == ""
    assert dispatcher([1]) == "Array"
    assert dispatcher({"a": 1}) == "Object"


def test_dispatcher2():
    assert dispatcher2(1, "a") == "Number/String"


def test_binary_overload(context):
    concat = overload2("concat", context=context)
    assert isinstance(concat, BinaryOverload)
    concat.register("String/String", lambda a: lambda b: a + b)
    concat.register("Array/Array", lambda a: lambda b: a + b)
    assert concat("a")("b") == "ab"
    assert concat([1])([2]) == [1, 2]
    assert context.history[0] == "concat([Number]) -> concat([Number])"


def test_binary_overload_partial_application(context):
    concat = overload2("concat", context=context)
    concat.register("String/String", lambda a: lambda b: a + b)
    concat.register("String/Number", "mixed")
    prefix = concat("a")
    assert prefix("b") == "ab"
    assert prefix("c") == "ac"
    assert prefix(1) == "mixed"
    with pytest.raises(ArityError):
        concat("a", "b")


def test_binary_overload_unknown_pair(context):
    concat = overload2("concat", context=context)
    concat.register("String/String", lambda a: lambda b: a + b)
    half = concat(1)
    with pytest.raises(OverloadError) as e:
        half("b")
    msg = str(e.value)
    assert 'concat cannot dispatch on "Number/String"' in msg
    assert "for the given values of type Number/String" in msg


def test_overload_without_guarding(context):
    context.enabled = False
    op = overload("op", context=context)
    op.register("Number", lambda n: n + 1)
    assert op(1) == 2
    with pytest.raises(OverloadError):
        op("a")
