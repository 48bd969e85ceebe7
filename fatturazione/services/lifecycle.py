"""
Ciclo di vita del documento.

    draft ──► issued ──► sent ──► paid
      │         │         │  ▲
      │         │         ▼  │
      │         │       overdue
      ▼         ▼         │
    cancelled ◄───────────┘

Le transizioni ammesse sono SOLO quelle elencate in LEGAL_TRANSITIONS.
paid e cancelled sono stati finali. Un documento non in bozza non si modifica:
si annulla con una nota di credito.
"""
from typing import FrozenSet, Tuple

from fatturazione.exceptions import ForbiddenOperationError
from fatturazione.models import Document, DocumentStatus

S = DocumentStatus

LEGAL_TRANSITIONS: FrozenSet[Tuple[DocumentStatus, DocumentStatus]] = frozenset({
    (S.DRAFT, S.ISSUED),
    (S.DRAFT, S.CANCELLED),
    (S.ISSUED, S.SENT),
    (S.ISSUED, S.CANCELLED),
    (S.SENT, S.PAID),
    (S.SENT, S.OVERDUE),
    (S.SENT, S.CANCELLED),
    (S.OVERDUE, S.PAID),
    (S.OVERDUE, S.CANCELLED),
})

TERMINAL_STATES: FrozenSet[DocumentStatus] = frozenset({S.PAID, S.CANCELLED})


def can_transition(current: DocumentStatus, target: DocumentStatus) -> bool:
    return (current, target) in LEGAL_TRANSITIONS


def is_terminal(status: DocumentStatus) -> bool:
    return status in TERMINAL_STATES


def is_finalized(status: DocumentStatus) -> bool:
    """Emesso o successivo, non annullato."""
    return status not in (S.DRAFT, S.CANCELLED)


def ensure_transition(current: DocumentStatus, target: DocumentStatus, operation: str = "transizione") -> None:
    """
    Raises:
        ForbiddenOperationError: se la coppia (current, target) non è ammessa
    """
    if not can_transition(current, target):
        raise ForbiddenOperationError(
            operation,
            "documento",
            f"transizione da '{current.value}' a '{target.value}' non ammessa"
        )


def ensure_editable(document: Document, operation: str) -> None:
    """Solo le bozze sono modificabili."""
    if not document.is_draft:
        raise ForbiddenOperationError(
            operation,
            f"documento {document.number or document.id}",
            f"il documento è in stato '{document.status.value}', solo le bozze sono modificabili"
        )
