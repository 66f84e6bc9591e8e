from __future__ import annotations

from typing import Any, List, Optional, Tuple

from domain.ports.executor import ExecutionResult

SUCCESS_FEEDBACK = "Correct! Your output matches the solution."
MISMATCH_FEEDBACK = "Incorrect. Output differs from the expected solution."
UNVALIDATED_FEEDBACK = "Could not validate. Check logic manually."


def _ordered_rows(rows: Any) -> List[List[Tuple[str, Any]]]:
    return [list(r.items()) for r in rows or []]


def results_match(user: ExecutionResult, expected: ExecutionResult) -> Optional[bool]:
    """
    Structural equality of two results.

    Rows are compared in order, each as its ordered (column, value) pairs, so
    two empty results match whatever their column names. A failing user run
    never matches; a failing reference gives None (nothing to compare with).
    """
    if not user.success:
        return False
    if not expected.success:
        return None
    if isinstance(user.output, str) or isinstance(expected.output, str):
        return user.output == expected.output
    return _ordered_rows(user.output) == _ordered_rows(expected.output)


def feedback_for(match: Optional[bool], user: ExecutionResult) -> str:
    if not user.success:
        return f"Error: {user.error}"
    if match is None:
        return UNVALIDATED_FEEDBACK
    return SUCCESS_FEEDBACK if match else MISMATCH_FEEDBACK
