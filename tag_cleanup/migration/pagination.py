"""
Paginacion por keyset: id > cursor, ordenado ASC, LIMIT batch_size.

El cursor avanza al id de la ultima fila de cada pagina despues de que el
consumidor la procesa; termina cuando una pagina viene vacia.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, Sequence, TypeVar

from tag_cleanup.shared.exceptions import BatchFetchError

T = TypeVar("T")

FetchPage = Callable[[int, int], Sequence[T]]


@dataclass(frozen=True)
class Page(Generic[T]):
    number: int
    cursor: int
    rows: Sequence[T]


def iter_pages(
    fetch_page: FetchPage,
    *,
    batch_size: int,
    key: Callable[[T], int],
    table: str,
    start: int = 0,
) -> Iterator[Page[T]]:
    """
    Itera paginas hasta recibir una vacia.

    - fetch_page(cursor, limit) debe devolver filas con id > cursor, ASC.
    - Si el ultimo id de una pagina no supera el cursor se levanta
      BatchFetchError (evita loops infinitos con keys no monotonicas).
    """
    cursor = start
    number = 0
    while True:
        rows = fetch_page(cursor, batch_size)
        if not rows:
            return

        number += 1
        yield Page(number=number, cursor=cursor, rows=rows)

        last = key(rows[-1])
        if last <= cursor:
            raise BatchFetchError(table, cursor, f"cursor did not advance (last id={last})")
        cursor = last
