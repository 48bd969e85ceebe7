"""
Regole di validazione per documenti e clienti.

Ogni controllo raccoglie TUTTE le violazioni e le restituisce insieme in un
ValidationResult: nessun controllo si interrompe alla prima regola violata.

REGOLE DOCUMENTO:
-----------------
- cliente, data documento e scadenza obbligatori
- scadenza non anteriore alla data documento, data documento non futura
- almeno una riga; per ogni riga descrizione, quantità > 0, prezzo >= 0
- sconti tra 0 e 100% e importi sconto non negativi
- sconto di riga non superiore all'importo della riga
- natura IVA obbligatoria con aliquota 0%, assente altrimenti, N6.x solo con 0%
- regime forfettario: causale con riferimento normativo (L. 190/2014)
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional
import re
import logging

from fatturazione.models import Client, ClientCategory, Document, DocumentType, IvaRate, LineItem
from fatturazione.exceptions import require_fields
from fatturazione.validators.fiscal_codes import codice_fiscale_error, partita_iva_error

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_OFFICE_CODE = re.compile(r"^[A-Z0-9]{6}$", re.IGNORECASE)


@dataclass
class ValidationResult:
    """Risultato di una validazione."""
    is_valid: bool
    errors: List[str]
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def success(cls, warnings: List[str] = None):
        return cls(is_valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: List[str], warnings: List[str] = None):
        return cls(is_valid=False, errors=errors, warnings=warnings or [])

    @classmethod
    def from_errors(cls, errors: List[str], warnings: List[str] = None):
        if errors:
            return cls.failure(errors, warnings)
        return cls.success(warnings)


class DocumentRules:
    """
    Regole di business sui documenti.
    Da usare prima di ogni creazione o modifica di una bozza.
    """

    @staticmethod
    def validate_item(
        item: LineItem,
        position: int,
        allow_negative: bool = False,
        flat_rate: bool = False
    ) -> List[str]:
        """
        Valida una singola riga; `position` è 1-based.
        Le note di credito hanno importi negati: `allow_negative` salta i controlli di segno.
        In regime forfettario l'aliquota dichiarata non si applica, quindi la
        natura IVA può accompagnare qualsiasi aliquota.
        """
        errors = []
        prefix = f"Riga {position}"

        if not item.description or not item.description.strip():
            errors.append(f"{prefix}: descrizione obbligatoria")
        if item.quantity <= 0:
            errors.append(f"{prefix}: la quantità deve essere maggiore di 0")
        if item.unit_price < 0 and not allow_negative:
            errors.append(f"{prefix}: il prezzo unitario non può essere negativo")
        if not Decimal("0") <= item.discount_percentage <= Decimal("100"):
            errors.append(f"{prefix}: lo sconto percentuale deve essere compreso tra 0 e 100")
        if item.discount_amount < 0 and not allow_negative:
            errors.append(f"{prefix}: lo sconto non può essere negativo")
        elif item.discount_percentage == 0 and abs(item.discount_amount) > abs(item.gross_amount):
            errors.append(f"{prefix}: lo sconto non può superare l'importo della riga")

        # FatturaPA 2.2.1.14
        if item.iva_rate == IvaRate.ZERO and item.natura_iva is None:
            errors.append(f"{prefix}: la natura IVA è obbligatoria con aliquota 0%")
        if item.iva_rate != IvaRate.ZERO and item.natura_iva is not None and not flat_rate:
            errors.append(f"{prefix}: la natura IVA va indicata solo con aliquota 0%")
        # Art. 17 DPR 633/72
        if item.natura_iva is not None and item.natura_iva.is_reverse_charge and item.iva_rate != IvaRate.ZERO:
            errors.append(f"{prefix}: in inversione contabile (N6.x) l'aliquota deve essere 0%")

        return errors

    @staticmethod
    def validate_document(document: Document, today: Optional[date] = None) -> ValidationResult:
        """
        Valida i dati di una bozza.

        Args:
            document: Documento da validare
            today: Data di riferimento per il controllo "data non futura"

        Returns:
            ValidationResult con tutte le violazioni trovate
        """
        today = today or date.today()
        errors: List[str] = []
        is_credit_note = document.document_type == DocumentType.CREDIT_NOTE

        if not document.client_id:
            errors.append("Il cliente è obbligatorio")

        if document.issue_date is None:
            errors.append("La data documento è obbligatoria")
        elif document.issue_date > today:
            errors.append("La data documento non può essere nel futuro")

        if document.due_date is None:
            errors.append("La data di scadenza è obbligatoria")
        elif document.issue_date is not None and document.due_date < document.issue_date:
            errors.append("La data di scadenza deve essere successiva alla data documento")

        if not document.items:
            errors.append("Il documento deve contenere almeno una riga")
        else:
            for position, item in enumerate(document.items, start=1):
                errors.extend(DocumentRules.validate_item(
                    item, position, allow_negative=is_credit_note, flat_rate=document.is_regime_forfettario
                ))

        if not Decimal("0") <= document.document_discount_percentage <= Decimal("100"):
            errors.append("Lo sconto percentuale di documento deve essere compreso tra 0 e 100")
        if document.document_discount_amount < 0 and not is_credit_note:
            errors.append("Lo sconto di documento non può essere negativo")

        # Legge 190/2014, commi 54-89
        if document.is_regime_forfettario:
            causale = (document.causale or "").upper()
            if not causale.strip():
                errors.append(
                    "Per il regime forfettario la causale è obbligatoria e deve citare "
                    "art. 1, commi 54-89, Legge n. 190/2014"
                )
            elif "ART. 1, COMMI 54-89" not in causale or "LEGGE" not in causale or "190/2014" not in causale:
                errors.append(
                    "Per il regime forfettario la causale deve contenere \"art. 1, commi 54-89\" "
                    "e \"Legge ... 190/2014\""
                )

        if errors:
            logger.debug(f"Documento {document.id} non valido: {'; '.join(errors)}")
        return ValidationResult.from_errors(errors)

    @staticmethod
    def validate_client(client: Client) -> ValidationResult:
        """Valida l'anagrafica fiscale di un cliente."""
        errors = require_fields({"nome": client.name.strip() if client.name else ""}, ["nome"])

        if not client.email:
            errors.append("Email è obbligatoria")
        elif not _EMAIL.match(client.email):
            errors.append("Email non è in un formato valido")

        if client.vat_number:
            piva_error = partita_iva_error(client.vat_number)
            if piva_error:
                errors.append(piva_error)

        if client.tax_code:
            cf_error = codice_fiscale_error(client.tax_code)
            if cf_error:
                errors.append(cf_error)

        if not client.vat_number and not client.tax_code:
            errors.append("Partita IVA o Codice Fiscale obbligatori")

        if client.category == ClientCategory.PUBLIC_ADMINISTRATION:
            if not client.office_code:
                errors.append("Codice Univoco Ufficio obbligatorio per clienti PA")
            elif not _OFFICE_CODE.match(client.office_code):
                errors.append("Codice Univoco Ufficio deve essere di 6 caratteri alfanumerici")

        if not Decimal("0") <= client.withholding_percentage <= Decimal("100"):
            errors.append("La percentuale di ritenuta deve essere compresa tra 0 e 100")
        if not Decimal("0") <= client.withholding_base_percentage <= Decimal("100"):
            errors.append("La base di calcolo della ritenuta deve essere compresa tra 0 e 100")

        if client.subject_to_withholding and client.subject_to_split_payment:
            errors.append("Ritenuta d'acconto e split payment sono alternativi")

        return ValidationResult.from_errors(errors)
