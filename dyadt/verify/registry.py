from __future__ import annotations

from collections.abc import Iterator

from dyadt_contracts import CustomChecker


class CheckerRegistry:
    """
    Name-keyed table of custom evidence predicates.

    Populate it before verification starts; a registry shared between
    threads must not be mutated while a `verify` call is in flight.
    Re-registering a name replaces the previous checker.

    Example:
        >>> registry = CheckerRegistry()
        >>> registry.register(
        ...     "is_even",
        ...     lambda params: Verdict.CONFIRMED
        ...     if int(params["number"]) % 2 == 0
        ...     else Verdict.REFUTED,
        ... )
    """

    def __init__(self, checkers: dict[str, CustomChecker] | None = None) -> None:
        self._checkers: dict[str, CustomChecker] = dict(checkers or {})

    def register(self, name: str, checker: CustomChecker) -> None:
        if name.strip() == "":
            raise ValueError("Checker name must be non-empty.")
        self._checkers[name] = checker

    def unregister(self, name: str) -> None:
        self._checkers.pop(name, None)

    def get(self, name: str) -> CustomChecker | None:
        return self._checkers.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._checkers))

    def __contains__(self, name: object) -> bool:
        return name in self._checkers

    def __len__(self) -> int:
        return len(self._checkers)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
