"""
Safe math and formatting helpers used across all analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total."""
    return safe_divide(part, total) * 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (Python's round() goes to even)."""
    return int(math.floor(value + 0.5))


def format_currency(num: float | None) -> str:
    """Compact dollar figure: $1.2B, $35M, $450K, $750. None → "-"."""
    if num is None or pd.isna(num):
        return "-"
    if num >= 1_000_000_000:
        return f"${num / 1_000_000_000:.1f}B"
    if num >= 1_000_000:
        return f"${round_half_up(num / 1_000_000)}M"
    if num >= 1_000:
        return f"${round_half_up(num / 1_000)}K"
    return f"${num:g}"


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas/enum types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            # Skip NaN/None keys, stringify the rest
            if k is None:
                continue
            if isinstance(k, float) and (math.isnan(k) or math.isinf(k)):
                continue
            clean[sanitize_for_json(k) if isinstance(k, str) else str(k)] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, str):
        # str-based enums serialize as their value
        return str(obj.value) if hasattr(obj, "value") else obj
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
