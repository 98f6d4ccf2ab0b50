"""
Decisions about switching between value and formula editing.

These functions only decide; the edit session applies the outcome by
rebuilding its editor. Typing "=" is never an error, only a choice between
switching to formula mode, offering to switch, or leaving the keystroke
alone.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel

FORMULA_PREFIX = "="


class InitialMode(BaseModel):
    is_formula: bool
    edit_value: Optional[str] = None
    # Offer (via tooltip) to turn the typed text into a formula
    offer_formula: bool = False


class EnterDecision(str, Enum):
    SWITCH = "switch"
    OFFER = "offer"
    IGNORE = "ignore"


def initial_mode(start_val: Optional[str], *, is_real_formula: bool, is_empty: bool,
                 readonly: bool) -> InitialMode:
    """Pick the mode an editor opens in, given the text typed to open it.

    On a formula column the editor always edits the formula. Typing "=" on
    an empty column makes it a formula; on a column with data it only
    offers to.
    """
    if readonly or not start_val or not start_val.startswith(FORMULA_PREFIX):
        return InitialMode(is_formula=is_real_formula, edit_value=start_val)
    if is_real_formula or is_empty:
        return InitialMode(is_formula=True, edit_value=strip_formula_prefix(start_val))
    return InitialMode(is_formula=False, edit_value=start_val, offer_formula=True)


def decide_enter(cursor_pos: int, editing_formula: bool, column_is_empty: bool) -> EnterDecision:
    """What typing "=" does in a value editor."""
    if cursor_pos != 0 or editing_formula:
        return EnterDecision.IGNORE
    if column_is_empty:
        return EnterDecision.SWITCH
    return EnterDecision.OFFER


def can_exit(cursor_pos: int, editing_formula: bool, column_is_real_formula: bool) -> bool:
    """Whether backspace at the start of a formula turns it back into a value.

    Only a conversion the user made in this editor can be undone this way;
    an existing formula column stays a formula.
    """
    return cursor_pos == 0 and editing_formula and not column_is_real_formula


def strip_formula_prefix(text: str) -> str:
    return text[len(FORMULA_PREFIX):] if text.startswith(FORMULA_PREFIX) else text


def restore_formula_prefix(text: str) -> Tuple[str, int]:
    """Text and cursor position for leaving formula mode: a literal "=" then the text."""
    return FORMULA_PREFIX + text, len(FORMULA_PREFIX)
