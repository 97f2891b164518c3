"""
Atomic variable editing.

Variables inside a pattern behave as single units while editing: the caret
never stops inside ``{...}``, arrow keys jump over a whole token and
Backspace/Delete remove a whole token at once. The host text widget calls
:func:`apply_key_intent` with its current text and caret and applies the
returned text and caret itself.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional

from campaign_builder.patterns.engine import VariableSpan, find_variables

if TYPE_CHECKING:
    from campaign_builder.hierarchy.models import DataSourceColumn


class KeyIntent(str, Enum):
    """Editing intents forwarded by the host widget."""
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    BACKSPACE = "backspace"
    DELETE = "delete"
    CLICK = "click"


@dataclass(frozen=True)
class EditResult:
    """Outcome of an edit; ``handled`` is False when plain character behaviour applied."""
    text: str
    cursor: int
    handled: bool = False


def variable_at(text: str, pos: int) -> Optional[VariableSpan]:
    """Token strictly straddling ``pos`` (``start < pos < end``)."""
    for span in find_variables(text):
        if span.start < pos < span.end:
            return span
    return None


def variable_ending_at(text: str, pos: int) -> Optional[VariableSpan]:
    """Token whose closing brace sits right before ``pos``."""
    for span in find_variables(text):
        if span.end == pos:
            return span
    return None


def variable_starting_at(text: str, pos: int) -> Optional[VariableSpan]:
    """Token whose opening brace sits at ``pos``."""
    for span in find_variables(text):
        if span.start == pos:
            return span
    return None


def _remove(text: str, start: int, end: int) -> EditResult:
    return EditResult(text=text[:start] + text[end:], cursor=start, handled=True)


def apply_key_intent(
    text: str,
    cursor: int,
    intent: KeyIntent,
    selection_end: Optional[int] = None
) -> EditResult:
    """
    Apply an editing intent with atomic-token semantics.

    Args:
        text: Current field value
        cursor: Caret offset (selection start when a selection exists)
        intent: What the user asked for
        selection_end: End of the selection, if any

    Returns:
        EditResult: New text and caret offset
    """
    text = text or ""
    cursor = max(0, min(cursor, len(text)))

    if selection_end is not None and selection_end != cursor:
        start, end = sorted((cursor, max(0, min(selection_end, len(text)))))
        if intent in (KeyIntent.BACKSPACE, KeyIntent.DELETE):
            return _remove(text, start, end)
        if intent == KeyIntent.MOVE_LEFT:
            return EditResult(text=text, cursor=start)
        if intent == KeyIntent.MOVE_RIGHT:
            return EditResult(text=text, cursor=end)
        return EditResult(text=text, cursor=cursor)

    inside = variable_at(text, cursor)

    if intent == KeyIntent.MOVE_LEFT:
        span = variable_ending_at(text, cursor) or inside
        if span:
            return EditResult(text=text, cursor=span.start, handled=True)
        return EditResult(text=text, cursor=max(cursor - 1, 0))

    if intent == KeyIntent.MOVE_RIGHT:
        span = variable_starting_at(text, cursor) or inside
        if span:
            return EditResult(text=text, cursor=span.end, handled=True)
        return EditResult(text=text, cursor=min(cursor + 1, len(text)))

    if intent == KeyIntent.BACKSPACE:
        # at {a}|{b} the token ending at the caret wins
        span = variable_ending_at(text, cursor) or inside
        if span:
            return _remove(text, span.start, span.end)
        if cursor == 0:
            return EditResult(text=text, cursor=0)
        return EditResult(text=text[:cursor - 1] + text[cursor:], cursor=cursor - 1)

    if intent == KeyIntent.DELETE:
        # at {a}|{b} the token starting at the caret wins
        span = variable_starting_at(text, cursor) or inside
        if span:
            return _remove(text, span.start, span.end)
        return EditResult(text=text[:cursor] + text[cursor + 1:], cursor=cursor)

    # CLICK: never leave the caret inside a token
    if inside:
        return EditResult(text=text, cursor=inside.end, handled=True)
    return EditResult(text=text, cursor=cursor)


def autocomplete_query(text: str, cursor: int) -> Optional[str]:
    """
    Partial variable name typed after an unclosed ``{`` before the caret.

    Returns None when the caret is not inside an open placeholder.
    """
    before = (text or "")[:cursor]
    open_index = before.rfind("{")
    if open_index == -1 or open_index < before.rfind("}"):
        return None
    return before[open_index + 1:]


def filter_columns(columns: Iterable["DataSourceColumn"], query: Optional[str]) -> List["DataSourceColumn"]:
    """Columns whose name contains ``query`` (case-insensitive)."""
    columns = list(columns)
    if not query:
        return columns
    needle = query.lower()
    return [column for column in columns if needle in column.name.lower()]


def insert_variable(text: str, cursor: int, column_name: str) -> EditResult:
    """
    Insert ``{column_name}`` at the caret.

    A partially typed placeholder (``"Buy {bra"``) is replaced rather than
    extended.
    """
    text = text or ""
    cursor = max(0, min(cursor, len(text)))
    before, after = text[:cursor], text[cursor:]
    if autocomplete_query(text, cursor) is not None:
        before = before[:before.rfind("{")]
    token = "{" + column_name + "}"
    return EditResult(text=before + token + after, cursor=len(before) + len(token), handled=True)
