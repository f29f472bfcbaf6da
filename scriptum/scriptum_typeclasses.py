"""
Predefined type classes: Bounded, Monoid, Setoid and Semigroup operations.

Every operation is an `Overload` keyed by the type tag of its first argument.
Binary operations are curried: ``eq(x)(y)``, ``append(xs)(ys)``. Container
equality recurses through `eq`, so nested values compare by their own
instances.
"""
from scriptum.scriptum_datatypes import All, Any, Char, Int, Product, Sum
from scriptum.scriptum_introspect import null, to_type_tag
from scriptum.scriptum_overload import overload

MAX_SAFE_INTEGER = 2 ** 53 - 1


# Bounded

min_bound = overload("minBound", to_type_tag)
max_bound = overload("maxBound", to_type_tag)

# Monoid

empty = overload("empty", to_type_tag)

# Setoid

eq = overload("eq", to_type_tag)
neq = overload("neq", to_type_tag)

# Semigroup

append = overload("append", to_type_tag)
prepend = overload("prepend", to_type_tag)


# -----------------------------------------------------------------
# Equality helpers
# -----------------------------------------------------------------

def eq_value(x):
    return lambda y: x == y


def eq_boxed(x):
    return lambda y: type(x) is type(y) and x.value == y.value


def eq_null(_):
    return lambda _: True


def eq_seq(xs):
    def compare(ys):
        if len(xs) != len(ys):
            return False
        return all(eq(x)(y) for x, y in zip(xs, ys))
    return compare


def eq_map(m):
    def compare(n):
        if len(m) != len(n):
            return False
        return all(k in n and eq(v)(n[k]) for k, v in m.items())
    return compare


def eq_set(s):
    return lambda t: len(s) == len(t) and all(k in t for k in s)


def negate(eq_impl):
    return lambda x: lambda y: not eq_impl(x)(y)


_EQ_INSTANCES = {
    "All": eq_boxed,
    "Any": eq_boxed,
    "Array": eq_seq,
    "Boolean": eq_value,
    "Char": eq_boxed,
    "Float": eq_boxed,
    "Integer": eq_boxed,
    "Map": eq_map,
    "Null": eq_null,
    "Number": eq_value,
    "Object": eq_map,
    "Product": eq_boxed,
    "Record": eq_map,
    "Set": eq_set,
    "String": eq_value,
    "Sum": eq_boxed,
    "Tuple": eq_seq,
}


def _register_instances():
    min_bound.register("Boolean", False)
    max_bound.register("Boolean", True)
    min_bound.register("Char", Char("\u0000"))
    max_bound.register("Char", Char("\U0010FFFF"))
    min_bound.register("Integer", Int(-MAX_SAFE_INTEGER))
    max_bound.register("Integer", Int(MAX_SAFE_INTEGER))
    min_bound.register("Null", null)
    max_bound.register("Null", null)

    empty.register("All", All(True))
    empty.register("Any", Any(False))
    empty.register("Array", lambda xs: [])
    empty.register("Product", Product(1))
    empty.register("String", "")
    empty.register("Sum", Sum(0))
    empty.register("Tuple", lambda t: tuple(empty(x) for x in t))

    append.register("All", lambda a: lambda b: All(a.value and b.value))
    append.register("Any", lambda a: lambda b: Any(a.value or b.value))
    append.register("Array", lambda xs: lambda ys: list(xs) + list(ys))
    append.register("Function", lambda f: lambda g: lambda x: append(f(x))(g(x)))
    append.register("Product", lambda m: lambda n: Product(m.value * n.value))
    append.register("String", lambda s: lambda t: s + t)
    append.register("Sum", lambda m: lambda n: Sum(m.value + n.value))
    append.register("Tuple", lambda xs: lambda ys: tuple(append(x)(y) for x, y in zip(xs, ys)))

    prepend.register("All", lambda b: lambda a: All(a.value and b.value))
    prepend.register("Any", lambda b: lambda a: Any(a.value or b.value))
    prepend.register("Array", lambda ys: lambda xs: list(xs) + list(ys))
    prepend.register("Function", lambda g: lambda f: lambda x: append(f(x))(g(x)))
    prepend.register("Product", lambda n: lambda m: Product(m.value * n.value))
    prepend.register("String", lambda t: lambda s: s + t)
    prepend.register("Sum", lambda n: lambda m: Sum(m.value + n.value))
    prepend.register("Tuple", lambda ys: lambda xs: tuple(append(x)(y) for x, y in zip(xs, ys)))

    for tag, impl in _EQ_INSTANCES.items():
        eq.register(tag, impl)
        neq.register(tag, negate(impl))


_register_instances()
