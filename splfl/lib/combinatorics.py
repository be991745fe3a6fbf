"""Integer combinatorics and the k-combination generator.

Python integers are unbounded, so none of these helpers overflow. The size
ceilings that the 64-bit domain imposed are enforced by
:data:`splfl.config.LIMITS` instead of by the arithmetic.
"""

from __future__ import annotations

from typing import (
    Generic,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

T = TypeVar("T")


def product(start: int, stop: int) -> int:
    """Return the product of the integers in the closed range [start, stop].

    Returns 0 when either bound is 0 and 1 for an empty range.
    """
    if start == 0 or stop == 0:
        return 0
    result = 1
    while start <= stop:
        result *= stop
        stop -= 1
    return result


def factorial(n: int) -> int:
    """Return n!."""
    return 1 if n == 0 else product(1, n)


def combinations(n: int, k: int) -> int:
    """Return the number of combinations of n items with sample size k."""
    if k < 0 or k > n:
        return 0
    if k == 0:
        return 1
    return product(n + 1 - k, n) // factorial(k)


def sum_of_combinations(n: int, k: int) -> int:
    """Return the sum of combinations of n items over sample sizes k..n."""
    result = 0
    while k <= n:
        result += combinations(n, k)
        k += 1
    return result


def power(base: int, exponent: int) -> int:
    """Return base raised to a non-negative integer exponent."""
    result = 1
    while exponent > 0:
        result *= base
        exponent -= 1
    return result


def power2(exponent: int) -> int:
    """Return 2 raised to exponent."""
    return 1 << exponent


def ceil_div(x: int, y: int) -> int:
    """Return x / y rounded up, for non-negative x and positive y."""
    return x // y + (1 if x % y else 0)


def unsigned_to_ids(u: int) -> List[int]:
    """Return the 1-based positions of the set bits of ``u`` in ascending order.

    Example:
        >>> unsigned_to_ids(0b101)
        [1, 3]
    """
    result: List[int] = []
    bit = 0
    while u:
        if u & 1:
            result.append(bit + 1)
        u >>= 1
        bit += 1
    return result


class KCombination(Generic[T]):
    """Stateful generator of all k-combinations of a symbol sequence.

    The state is a list of k strictly increasing indices into ``symbols``.
    It starts at ``[0, 1, ..., k-1]`` and :meth:`advance` moves it to the next
    combination in lexicographic order. Iterating over the object restarts
    from the first combination and yields each one as a tuple of symbols.

    Example:
        >>> [c for c in KCombination("abcd", 2)][:3]
        [('a', 'b'), ('a', 'c'), ('a', 'd')]
    """

    def __init__(self, symbols: Sequence[T], k: int) -> None:
        self._symbols: Tuple[T, ...] = tuple(symbols)
        if k < 0 or k > len(self._symbols):
            raise ValueError(
                f"n = {len(self._symbols)}, k = {k} violates 0 <= k <= n"
            )
        self._k = k
        self._state: List[int] = []
        self.reset()

    @property
    def k(self) -> int:
        return self._k

    @property
    def n(self) -> int:
        return len(self._symbols)

    @property
    def symbols(self) -> Tuple[T, ...]:
        return self._symbols

    @property
    def state(self) -> Tuple[int, ...]:
        """Current indices into ``symbols``."""
        return tuple(self._state)

    def reset(self) -> None:
        """Return to the lexicographically first combination."""
        self._state = list(range(self._k))

    def advance(self) -> bool:
        """Move to the next combination.

        Scans from the rightmost position to the left and increments the
        first index that still leaves room for the positions to its right;
        those positions are then reset to consecutive values.

        Returns:
            True if a next combination exists, False when exhausted (the state
            is left unchanged in that case).
        """
        n = self.n
        k = self._k
        for i in range(k, 0, -1):
            value = self._state[i - 1]
            if value + 1 + k - i < n:
                self._state[i - 1] = value + 1
                for j in range(i, k):
                    self._state[j] = self._state[j - 1] + 1
                return True
        return False

    def current(self) -> Tuple[T, ...]:
        """Return the symbols of the current combination."""
        return tuple(self._symbols[i] for i in self._state)

    def __iter__(self) -> Iterator[Tuple[T, ...]]:
        self.reset()
        while True:
            yield self.current()
            if not self.advance():
                return

    def __len__(self) -> int:
        return combinations(self.n, self._k)


def combinations_by_size(
    symbols: Sequence[T], start: int = 2, stop: Optional[int] = None
) -> Iterator[Tuple[T, ...]]:
    """Yield every k-combination of ``symbols`` for k = start..stop.

    Sizes are visited in increasing order and, within one size, combinations
    come in lexicographic order. ``stop`` defaults to ``len(symbols)``.
    """
    if stop is None:
        stop = len(symbols)
    for k in range(start, stop + 1):
        yield from KCombination(symbols, k)
