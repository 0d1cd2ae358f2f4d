"""Choice label → display color classification."""

from __future__ import annotations

from govtally.schemas.votes import ChoiceColor, ColorCategory

_APPROVE_LABELS = frozenset({"yes", "for", "approve"})
_REJECT_LABELS = frozenset({"no", "against", "reject"})

# Size of the renderer's fallback palette
PALETTE_SIZE = 8


def classify_choice(label: str, index: int) -> ColorCategory:
    """Map a choice label to its display color.

    Exact, case-insensitive match against the approve/reject vocabularies;
    anything else falls back to a palette bucket derived from the choice's
    position.

    Args:
        label: Choice label as declared by the proposal.
        index: 0-based position of the choice.

    Returns:
        ChoiceColor.APPROVE, ChoiceColor.REJECT, or an int in 0..7.
    """
    value = label.lower()
    if value in _APPROVE_LABELS:
        return ChoiceColor.APPROVE
    if value in _REJECT_LABELS:
        return ChoiceColor.REJECT
    return index % PALETTE_SIZE
