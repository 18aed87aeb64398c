from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional

from freshbasket.app.common.errors import abort_json

_TRUE = {"1", "true", "yes", "on"}


def decimal_arg(args: Mapping[str, str], name: str) -> Optional[Decimal]:
    raw = (args.get(name) or "").strip()
    if not raw:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        abort_json(400, "validation_error", f"{name} must be a number", {"field": name})
    if not value.is_finite() or value < 0:
        abort_json(400, "validation_error", f"{name} must be a non-negative number", {"field": name})
    return value


def int_arg(args: Mapping[str, str], name: str, default: Optional[int] = None, maximum: int = 100) -> Optional[int]:
    raw = (args.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        abort_json(400, "validation_error", f"{name} must be an integer", {"field": name})
    return max(1, min(value, maximum))


def bool_arg(args: Mapping[str, str], name: str) -> bool:
    return (args.get(name) or "").strip().lower() in _TRUE
