"""
Test macchina a stati del documento.
"""
import itertools

import pytest

from fatturazione.exceptions import ForbiddenOperationError
from fatturazione.models import Document, DocumentStatus as S
from fatturazione.services.lifecycle import (
    LEGAL_TRANSITIONS,
    can_transition,
    ensure_editable,
    ensure_transition,
    is_terminal
)

EXPECTED = {
    (S.DRAFT, S.ISSUED),
    (S.DRAFT, S.CANCELLED),
    (S.ISSUED, S.SENT),
    (S.ISSUED, S.CANCELLED),
    (S.SENT, S.PAID),
    (S.SENT, S.OVERDUE),
    (S.SENT, S.CANCELLED),
    (S.OVERDUE, S.PAID),
    (S.OVERDUE, S.CANCELLED),
}


class TestTransitions:

    def test_table_has_exactly_nine_pairs(self):
        assert LEGAL_TRANSITIONS == EXPECTED

    @pytest.mark.parametrize("current,target", list(itertools.product(S, S)))
    def test_every_pair(self, current, target):
        assert can_transition(current, target) == ((current, target) in EXPECTED)

    @pytest.mark.parametrize("status", list(S))
    def test_no_self_transition(self, status):
        assert not can_transition(status, status)

    @pytest.mark.parametrize("terminal", [S.PAID, S.CANCELLED])
    def test_nothing_leaves_terminal_states(self, terminal):
        assert is_terminal(terminal)
        assert not any(can_transition(terminal, target) for target in S)

    def test_non_terminal_states(self):
        assert not any(is_terminal(s) for s in (S.DRAFT, S.ISSUED, S.SENT, S.OVERDUE))

    def test_ensure_transition_raises_forbidden(self):
        ensure_transition(S.DRAFT, S.ISSUED)

        with pytest.raises(ForbiddenOperationError) as exc_info:
            ensure_transition(S.ISSUED, S.ISSUED, "emissione")

        assert exc_info.value.status_code == 403
        assert exc_info.value.operation == "emissione"


class TestEditable:

    def test_draft_is_editable(self):
        ensure_editable(Document(), "modifica")

    @pytest.mark.parametrize("status", [S.ISSUED, S.SENT, S.PAID, S.OVERDUE, S.CANCELLED])
    def test_finalized_is_immutable(self, status):
        with pytest.raises(ForbiddenOperationError):
            ensure_editable(Document(status=status, number="2026/001"), "modifica")
