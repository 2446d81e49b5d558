"""Registry of resource names that must never be exposed over REST."""

from collections.abc import Iterable, Iterator


class ExcludedModels:
    """Ordered, duplicate-free set of excluded resource names.

    Populated once at startup from ``rest.excluded_models``; afterwards it
    only changes through :meth:`exclude_model` and :meth:`exclude_models`.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: dict[str, None] = {}
        self.exclude_models(names)

    def exclude_model(self, name: str) -> None:
        """Exclude one resource name; repeated names are ignored."""
        self._names.setdefault(name, None)

    def exclude_models(self, names: Iterable[str]) -> None:
        """Exclude several resource names."""
        for name in names:
            self.exclude_model(name)

    @property
    def excluded_models(self) -> list[str]:
        """Excluded names in the order they were first added."""
        return list(self._names)

    def is_excluded(self, name: str) -> bool:
        """Whether ``name`` is excluded."""
        return name in self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ExcludedModels({self.excluded_models!r})"
