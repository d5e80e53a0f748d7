from __future__ import annotations

from twap_oracle.domain.exceptions import ArithmeticOverflowError


MAX_UINT128 = 2**128 - 1
MAX_UINT160 = 2**160 - 1
MAX_UINT256 = 2**256 - 1


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator) with full precision.

    Operands are uint256. Fails when the denominator is zero or the
    result does not fit in uint256.
    """
    _require_uint256(a, "a")
    _require_uint256(b, "b")
    _require_uint256(denominator, "denominator")
    if denominator == 0:
        raise ArithmeticOverflowError("mul_div denominator is zero.")
    result = (a * b) // denominator
    if result > MAX_UINT256:
        raise ArithmeticOverflowError("mul_div result overflows uint256.")
    return result


def _require_uint256(value: int, field_name: str) -> None:
    if value < 0 or value > MAX_UINT256:
        raise ArithmeticOverflowError(f"{field_name} is not a uint256 value.")
