"""
Numerazione progressiva dei documenti.

Formato: AAAA/NNN (anno a 4 cifre, progressivo di almeno 3 cifre).
La numerazione è unica e NON riparte da 1 al cambio d'anno: cambia solo
l'anno stampato, il progressivo continua.

Il contatore è l'unico stato condiviso del motore. L'allocazione
(lettura ultimo numero → calcolo successivo → scrittura) avviene sotto un
asyncio.Lock nel processo e viene resa persistente con un compare-and-swap,
così due processi non possono assegnare lo stesso numero.
Durante l'emissione il documento viene registrato prima di avanzare il
contatore: un'emissione fallita non lascia buchi nella sequenza.
"""
from datetime import date
from typing import Awaitable, Callable, Optional, Tuple, TypeVar
import asyncio
import logging
import re

from fatturazione.exceptions import ConflictError, InvalidInputError
from fatturazione.repositories.contracts import SequenceStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

NUMBER_PATTERN = re.compile(r"^(\d{4})/(\d{3,})$")


def format_number(year: int, ordinal: int) -> str:
    return f"{year:04d}/{ordinal:03d}"


def parse_number(value: str) -> Tuple[int, int]:
    """
    Returns:
        (anno, progressivo)

    Raises:
        InvalidInputError: se il numero non rispetta il formato AAAA/NNN
    """
    match = NUMBER_PATTERN.match(value or "")
    if not match:
        raise InvalidInputError(f"Numero documento non valido: '{value}' (formato atteso AAAA/NNN)")
    return int(match.group(1)), int(match.group(2))


def ordinal_of(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    return parse_number(value)[1]


def next_number(last_number: Optional[str], year: int) -> str:
    """Numero successivo a `last_number` per l'anno corrente."""
    if not last_number:
        return format_number(year, 1)
    _, ordinal = parse_number(last_number)
    return format_number(year, ordinal + 1)


class NumberingAllocator:
    """Allocatore atomico dei numeri documento."""

    def __init__(
        self,
        sequence_store: SequenceStore,
        fallback_last_number: Optional[Callable[[], Awaitable[Optional[str]]]] = None,
        today: Optional[Callable[[], date]] = None
    ):
        """
        Args:
            sequence_store: Contatore persistente con compare-and-swap
            fallback_last_number: Usato solo a contatore vuoto, ad esempio
                l'ultimo numero presente nell'archivio documenti
            today: Sorgente della data corrente (per i test)
        """
        self.sequence_store = sequence_store
        self.fallback_last_number = fallback_last_number
        self.today = today or date.today
        self._lock = asyncio.Lock()

    async def _candidate(self) -> Tuple[Optional[str], str]:
        stored = await self.sequence_store.get_last_number()

        last = stored
        if last is None and self.fallback_last_number is not None:
            last = await self.fallback_last_number()

        return stored, next_number(last, self.today().year)

    async def allocate(self) -> str:
        """
        Assegna il prossimo numero.

        Raises:
            ConflictError: se un altro processo ha aggiornato il contatore
                tra lettura e scrittura; nessun numero viene restituito
        """
        async with self._lock:
            stored, candidate = await self._candidate()

            swapped = await self.sequence_store.compare_and_swap(stored, candidate)
            if not swapped:
                logger.warning(f"Numerazione: contatore modificato da altro processo (atteso {stored})")
                raise ConflictError(
                    "numerazione",
                    "il contatore è stato aggiornato da un'altra emissione, riprovare",
                    details={"expected_last_number": stored, "candidate": candidate}
                )

            logger.info(f"✅ Numero assegnato: {candidate}")
            return candidate

    async def allocate_and_persist(self, persist: Callable[[str], Awaitable[T]]) -> T:
        """
        Assegna il prossimo numero e registra il documento nella stessa sezione critica.

        `persist` riceve il numero candidato e salva il documento emesso. Il
        contatore avanza solo se `persist` termina senza errori: un'emissione
        fallita non consuma numeri. L'archivio documenti rifiuta numeri
        duplicati, quindi tra processi diversi vince una sola scrittura.

        Raises:
            ConflictError: dal callback (documento non più in bozza, numero
                già registrato da un altro processo)
        """
        async with self._lock:
            stored, candidate = await self._candidate()

            result = await persist(candidate)

            if not await self.sequence_store.compare_and_swap(stored, candidate):
                await self._catch_up(candidate)

            logger.info(f"✅ Numero assegnato e registrato: {candidate}")
            return result

    async def _catch_up(self, number: str) -> None:
        """Allinea il contatore a un numero già registrato, senza mai farlo arretrare."""
        ordinal = parse_number(number)[1]
        current = await self.sequence_store.get_last_number()
        while current is None or parse_number(current)[1] < ordinal:
            if await self.sequence_store.compare_and_swap(current, number):
                return
            current = await self.sequence_store.get_last_number()
        logger.warning(f"Numerazione: contatore già oltre {number} ({current})")
