"""Utility modules for cross-cutting concerns."""

from utils.timezone import (
    now_utc,
    today_utc,
    to_utc,
    parse_iso,
    parse_date,
    as_utc_datetime,
    start_of_day_utc,
)
from utils.operator_context import (
    get_operator_id,
    set_operator_id,
    clear_operator_id,
    operator_context,
)
