"""Environment-driven runtime switches, read once at import."""

from __future__ import annotations

import os
from typing import Final

import jax


def _optional_int(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    return int(raw.strip())


ENABLE_X64: Final[bool] = os.environ.get("TSVEC_JAX_DISABLE_X64", "0") != "1"
STRICT_COMPARE: Final[bool] = os.environ.get("TSVEC_JAX_STRICT_COMPARE", "0") == "1"
PROBABILITY_TOLERANCE: Final[float] = float(os.environ.get("TSVEC_JAX_PROBABILITY_TOLERANCE", "1e-6"))
SAMPLE_SEED: Final[int | None] = _optional_int(os.environ.get("TSVEC_JAX_SEED"))

if ENABLE_X64:
    # Statistics are compared against closed-form float64 results.
    jax.config.update("jax_enable_x64", True)
