"""tsvec-jax public API."""

from . import config
from .errors import (
    DegenerateInputError,
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidOperatorError,
    LengthMismatchError,
    LengthMismatchWarning,
    MissingSourceReferenceError,
    ProbabilityTableWarning,
    TSVecError,
    TSVecRuntimeError,
    TSVecWarning,
    TypeMismatchError,
)
from .broadcast import ArithmeticOp, LogicalOp
from .relational import Comparison
from .values import (
    BoolMask,
    Vector,
    bool_vector,
    bool_vector_of,
    concat,
    filter,
    filter_except,
    replicate,
    seq,
    vector,
    vector_of,
    which,
    which_max,
    which_min,
    which_not,
)
from .lifting import LIFTED, derivative, forall, lift, lifted, register_scalar_function, sum_all
from .sampling import JaxUniformSource, UniformSource, sample
from .stats import (
    NO_SEASONALITY,
    LinearFit,
    autocorrelation,
    diff,
    estimate_seasonality,
    expectation,
    guess_pattern,
    linear_regression,
    mean,
    median,
    variance,
)

__all__ = [
    "Vector",
    "BoolMask",
    "vector",
    "vector_of",
    "bool_vector",
    "bool_vector_of",
    "seq",
    "replicate",
    "concat",
    "which",
    "which_not",
    "which_max",
    "which_min",
    "filter",
    "filter_except",
    "ArithmeticOp",
    "LogicalOp",
    "Comparison",
    "forall",
    "lift",
    "lifted",
    "LIFTED",
    "register_scalar_function",
    "derivative",
    "sum_all",
    "sample",
    "UniformSource",
    "JaxUniformSource",
    "mean",
    "expectation",
    "variance",
    "diff",
    "median",
    "autocorrelation",
    "estimate_seasonality",
    "NO_SEASONALITY",
    "linear_regression",
    "LinearFit",
    "guess_pattern",
    "TSVecError",
    "TSVecRuntimeError",
    "EmptyInputError",
    "DegenerateInputError",
    "LengthMismatchError",
    "TypeMismatchError",
    "InvalidOperatorError",
    "MissingSourceReferenceError",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "TSVecWarning",
    "LengthMismatchWarning",
    "ProbabilityTableWarning",
]
