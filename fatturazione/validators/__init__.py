"""
Validators package.
Fiscal identifier checksums and document/client rules.
"""
from .fiscal_codes import (
    normalizza_piva,
    partita_iva_error,
    validate_partita_iva,
    codice_fiscale_error,
    validate_codice_fiscale
)
from .document_rules import ValidationResult, DocumentRules

__all__ = [
    "normalizza_piva",
    "partita_iva_error",
    "validate_partita_iva",
    "codice_fiscale_error",
    "validate_codice_fiscale",
    "ValidationResult",
    "DocumentRules"
]
