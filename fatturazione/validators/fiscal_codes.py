"""
Validatori per Partita IVA e Codice Fiscale.

Partita IVA: 11 cifre, ultima cifra di controllo (algoritmo tipo Luhn).
Codice Fiscale persona fisica: 16 caratteri, carattere di controllo secondo
DM 12/03/1974. Un codice fiscale di 11 cifre (persona giuridica) coincide con
la partita IVA e ne segue l'algoritmo.
"""
import re
from typing import Optional

_CF_PERSONA_FISICA = re.compile(r"^[A-Z]{6}\d{2}[A-Z]\d{2}[A-Z]\d{3}[A-Z]$")
_CF_PERSONA_GIURIDICA = re.compile(r"^\d{11}$")

# Valori dei caratteri in posizione dispari (1, 3, ..., 15)
_ODD_VALUES = {
    '0': 1, '1': 0, '2': 5, '3': 7, '4': 9, '5': 13, '6': 15, '7': 17, '8': 19, '9': 21,
    'A': 1, 'B': 0, 'C': 5, 'D': 7, 'E': 9, 'F': 13, 'G': 15, 'H': 17, 'I': 19, 'J': 21,
    'K': 2, 'L': 4, 'M': 18, 'N': 20, 'O': 11, 'P': 3, 'Q': 6, 'R': 8, 'S': 12, 'T': 14,
    'U': 16, 'V': 10, 'W': 22, 'X': 25, 'Y': 24, 'Z': 23,
}

# Posizioni pari (2, 4, ..., 14): cifre col proprio valore, lettere A=0 ... Z=25
_EVEN_VALUES = {
    **{str(d): d for d in range(10)},
    **{chr(ord('A') + i): i for i in range(26)},
}


def normalizza_piva(piva: str) -> str:
    """Normalizza una partita IVA rimuovendo spazi e trattini."""
    if not piva:
        return ""
    return piva.replace(" ", "").replace("-", "").upper()


def _piva_checksum_ok(digits: str) -> bool:
    total = 0
    for i, ch in enumerate(digits[:10]):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return (10 - total % 10) % 10 == int(digits[10])


def partita_iva_error(piva: Optional[str]) -> Optional[str]:
    """Return the validation message for a Partita IVA, or None when valid."""
    if not piva or not piva.strip():
        return "Partita IVA è obbligatoria"

    value = normalizza_piva(piva)
    if len(value) != 11:
        return "Partita IVA deve essere di 11 cifre"
    if not value.isdigit():
        return "Partita IVA deve contenere solo numeri"
    if not _piva_checksum_ok(value):
        return "Partita IVA non valida (checksum errato)"
    return None


def validate_partita_iva(piva: Optional[str]) -> bool:
    return partita_iva_error(piva) is None


def _cf_checksum_ok(cf: str) -> bool:
    total = 0
    for i, ch in enumerate(cf[:15]):
        table = _ODD_VALUES if i % 2 == 0 else _EVEN_VALUES
        if ch not in table:
            return False
        total += table[ch]
    return cf[15] == chr(ord('A') + total % 26)


def codice_fiscale_error(cf: Optional[str]) -> Optional[str]:
    """Return the validation message for a Codice Fiscale, or None when valid."""
    if not cf or not cf.strip():
        return "Codice Fiscale è obbligatorio"

    value = cf.strip().upper()
    if _CF_PERSONA_GIURIDICA.match(value):
        if not _piva_checksum_ok(value):
            return "Codice Fiscale non valido (checksum errato)"
        return None
    if not _CF_PERSONA_FISICA.match(value):
        return "Codice Fiscale deve essere 16 caratteri alfanumerici (persona fisica) o 11 cifre (persona giuridica)"
    if not _cf_checksum_ok(value):
        return "Codice Fiscale non valido (carattere di controllo errato)"
    return None


def validate_codice_fiscale(cf: Optional[str]) -> bool:
    return codice_fiscale_error(cf) is None
