"""
Test numerazione progressiva.

La numerazione non riparte a inizio anno e non deve mai restituire due volte
lo stesso numero, anche con emissioni concorrenti.
"""
from datetime import date
import asyncio
import re

import pytest

from fatturazione.exceptions import ConflictError, InvalidInputError
from fatturazione.repositories import InMemorySequenceStore
from fatturazione.services.numbering import (
    NumberingAllocator,
    format_number,
    next_number,
    parse_number
)

NUMBER_RE = re.compile(r"^\d{4}/\d{3,}$")


class TestFormat:

    def test_format(self):
        assert format_number(2026, 7) == "2026/007"
        assert format_number(2026, 1234) == "2026/1234"
        assert format_number(999, 1) == "0999/001"

    def test_parse(self):
        assert parse_number("2026/007") == (2026, 7)
        assert parse_number("2026/1234") == (2026, 1234)

    @pytest.mark.parametrize("value", ["26/001", "2026-001", "2026/01", "", "2026/00A"])
    def test_parse_rejects_bad_format(self, value):
        with pytest.raises(InvalidInputError):
            parse_number(value)

    def test_first_number(self):
        assert next_number(None, 2026) == "2026/001"

    def test_next_number(self):
        assert next_number("2026/007", 2026) == "2026/008"
        assert next_number("2026/999", 2026) == "2026/1000"

    def test_no_reset_at_year_boundary(self):
        assert next_number("2025/041", 2026) == "2026/042"


class TestAllocator:

    @pytest.mark.asyncio
    async def test_first_allocation(self):
        allocator = NumberingAllocator(InMemorySequenceStore(), today=lambda: date(2026, 1, 10))
        assert await allocator.allocate() == "2026/001"
        assert await allocator.allocate() == "2026/002"

    @pytest.mark.asyncio
    async def test_year_rollover_keeps_counting(self):
        store = InMemorySequenceStore("2025/120")
        allocator = NumberingAllocator(store, today=lambda: date(2026, 1, 2))

        assert await allocator.allocate() == "2026/121"
        assert await store.get_last_number() == "2026/121"

    @pytest.mark.asyncio
    async def test_fallback_when_sequence_empty(self):
        async def last_document_number():
            return "2025/050"

        allocator = NumberingAllocator(
            InMemorySequenceStore(),
            fallback_last_number=last_document_number,
            today=lambda: date(2026, 2, 1)
        )
        assert await allocator.allocate() == "2026/051"

    @pytest.mark.asyncio
    async def test_concurrent_allocations_are_unique_and_gapless(self):
        """N emissioni concorrenti: N numeri distinti, consecutivi, crescenti."""
        store = InMemorySequenceStore("2026/010")
        allocator = NumberingAllocator(store, today=lambda: date(2026, 5, 1))
        n = 25

        numbers = await asyncio.gather(*(allocator.allocate() for _ in range(n)))

        assert len(set(numbers)) == n
        assert all(NUMBER_RE.match(number) for number in numbers)
        ordinals = [parse_number(number)[1] for number in numbers]
        assert ordinals == list(range(11, 11 + n))
        assert await store.get_last_number() == f"2026/{10 + n:03d}"

    @pytest.mark.asyncio
    async def test_compare_and_swap_detects_other_process(self):
        """Due allocatori (due processi) sullo stesso contatore: uno solo vince."""
        store = InMemorySequenceStore("2026/010")
        first = NumberingAllocator(store, today=lambda: date(2026, 5, 1))
        second = NumberingAllocator(store, today=lambda: date(2026, 5, 1))

        results = await asyncio.gather(first.allocate(), second.allocate(), return_exceptions=True)

        numbers = [r for r in results if isinstance(r, str)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert numbers == ["2026/011"]
        assert len(conflicts) == 1
        assert conflicts[0].status_code == 409
        assert await store.get_last_number() == "2026/011"

    @pytest.mark.asyncio
    async def test_cross_process_allocations_never_duplicate(self):
        store = InMemorySequenceStore()
        allocators = [NumberingAllocator(store, today=lambda: date(2026, 5, 1)) for _ in range(4)]

        results = await asyncio.gather(
            *(a.allocate() for a in allocators for _ in range(5)),
            return_exceptions=True
        )

        numbers = [r for r in results if isinstance(r, str)]
        assert numbers
        assert len(numbers) == len(set(numbers))
        assert all(isinstance(r, (str, ConflictError)) for r in results)


class TestAllocateAndPersist:

    @pytest.mark.asyncio
    async def test_counter_advances_after_write(self):
        store = InMemorySequenceStore("2026/010")
        allocator = NumberingAllocator(store, today=lambda: date(2026, 5, 1))
        written = []

        async def persist(number):
            written.append(number)
            assert await store.get_last_number() == "2026/010"
            return number

        assert await allocator.allocate_and_persist(persist) == "2026/011"
        assert written == ["2026/011"]
        assert await store.get_last_number() == "2026/011"

    @pytest.mark.asyncio
    async def test_failed_write_keeps_number_available(self):
        store = InMemorySequenceStore("2026/010")
        allocator = NumberingAllocator(store, today=lambda: date(2026, 5, 1))

        async def persist(number):
            raise ConflictError("documento", "il documento non è più in bozza")

        with pytest.raises(ConflictError):
            await allocator.allocate_and_persist(persist)

        assert await store.get_last_number() == "2026/010"
        assert await allocator.allocate() == "2026/011"

    @pytest.mark.asyncio
    async def test_concurrent_writes_are_gapless(self):
        store = InMemorySequenceStore()
        allocator = NumberingAllocator(store, today=lambda: date(2026, 5, 1))
        rejected = {3, 7}
        attempts = []

        async def persist(number):
            attempts.append(number)
            if len(attempts) in rejected:
                raise ConflictError("documento", "il documento non è più in bozza")
            return number

        results = await asyncio.gather(
            *(allocator.allocate_and_persist(persist) for _ in range(10)),
            return_exceptions=True
        )

        numbers = sorted(r for r in results if isinstance(r, str))
        assert numbers == [f"2026/{i:03d}" for i in range(1, 9)]

    @pytest.mark.asyncio
    async def test_counter_realigned_when_moved_by_other_writer(self):
        store = InMemorySequenceStore()

        async def last_document_number():
            return "2026/050"

        allocator = NumberingAllocator(
            store, fallback_last_number=last_document_number, today=lambda: date(2026, 5, 1)
        )

        async def persist(number):
            await store.compare_and_swap(None, "2026/040")
            return number

        assert await allocator.allocate_and_persist(persist) == "2026/051"
        assert await store.get_last_number() == "2026/051"
