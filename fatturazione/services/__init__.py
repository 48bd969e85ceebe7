"""
Services package.
Fiscal computation and document lifecycle.
"""
from .line_item_calculator import (
    calculate_item,
    apply_document_discount,
    distribute_document_discount
)
from .withholding_policy import WithholdingPolicy
from .stamp_duty_policy import StampDutyPolicy
from .document_aggregator import DocumentAggregator
from .lifecycle import (
    LEGAL_TRANSITIONS,
    can_transition,
    ensure_transition,
    ensure_editable,
    is_terminal
)
from .numbering import NumberingAllocator, format_number, parse_number, next_number
from .credit_note_service import NoteDeriver
from .document_service import DocumentService
from .client_service import ClientService

__all__ = [
    "calculate_item",
    "apply_document_discount",
    "distribute_document_discount",
    "WithholdingPolicy",
    "StampDutyPolicy",
    "DocumentAggregator",
    "LEGAL_TRANSITIONS",
    "can_transition",
    "ensure_transition",
    "ensure_editable",
    "is_terminal",
    "NumberingAllocator",
    "format_number",
    "parse_number",
    "next_number",
    "NoteDeriver",
    "DocumentService",
    "ClientService",
]
