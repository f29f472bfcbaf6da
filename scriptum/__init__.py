from scriptum.scriptum_errors import (
    ScriptumError, ArgTypeError, ArgValueError, ArityError, ReturnTypeError,
    TypeCoercionError, OverloadError, IndexGapError,
)
from scriptum.scriptum_introspect import (
    Symbol, SIG, TAG, LOG, Null, null, INVALID_TYPES,
    Introspector, describe, to_type_tag, is_invalid, is_homogeneous,
)
from scriptum.scriptum_config import GuardConfig, load_config
from scriptum.scriptum_runtime import (
    CallHistory, GuardContext, get_context, set_context, set_guarded, is_guarded,
    configure_logging,
)
from scriptum.scriptum_guard import GuardedFunction, guard, guard_sum
from scriptum.scriptum_overload import (
    Overload, BinaryOverload, overload, overload2, dispatcher, dispatcher2,
)
from scriptum.scriptum_datatypes import (
    NoCoercion, Boxed, All, Any, Char, Float, Int, Sum, Product, Rec, Variant, Type, Data,
)
from scriptum.scriptum_containers import (
    HomogeneousContainer, HomogeneousList, HomogeneousMap, HomogeneousSet, wrap_homogeneous,
)
from scriptum.scriptum_typeclasses import min_bound, max_bound, empty, eq, neq, append, prepend

__version__ = "0.1.0"
