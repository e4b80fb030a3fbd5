"""Lookup table from provider id to ``ProviderAdapter`` class.

The built-in adapters register themselves at import time.  Any other
provider is found through package entry-points in the
``"kanbanflow.providers"`` group, the first time a lookup misses::

    [project.entry-points."kanbanflow.providers"]
    my-provider = "my_package.adapters:MyAdapter"

Discovery runs at most once per registry.
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENTRY_POINT_GROUP = "kanbanflow.providers"


class ProviderNotFoundError(KeyError):
    """No adapter is known for ``provider_name``, built in or installed."""

    def __init__(self, name: str) -> None:
        self.provider_name = name
        super().__init__(
            f"No adapter for provider {name!r}. Install a package that declares it "
            f"under the {ENTRY_POINT_GROUP!r} entry-point group."
        )


class ProviderRegistry(Generic[T]):
    """Adapter classes keyed by provider id.

    Parameters
    ----------
    base_class:
        Every registered class must subclass this.
    group:
        Entry-point group searched when a lookup misses.
    """

    def __init__(self, base_class: type[T], group: str = ENTRY_POINT_GROUP) -> None:
        self._base_class = base_class
        self._group = group
        self._classes: dict[str, type[T]] = {}
        self._discovered = False

    def register(self, name: str) -> Callable[[type[T]], type[T]]:
        """Class decorator adding the class under *name*.

        Raises ``ValueError`` if *name* is taken and ``TypeError`` if the
        class is not a ``base_class`` subclass.
        """

        def decorator(cls: type[T]) -> type[T]:
            if name in self._classes:
                raise ValueError(f"Provider {name!r} is already registered")
            self._check(name, cls)
            self._classes[name] = cls
            return cls

        return decorator

    def get(self, name: str) -> type[T]:
        """Return the class for *name*, searching entry-points on a first miss.

        Raises
        ------
        ProviderNotFoundError
            If neither the built-ins nor any installed package provide *name*.
        """
        if name not in self._classes and not self._discovered:
            self.discover()
        try:
            return self._classes[name]
        except KeyError:
            raise ProviderNotFoundError(name) from None

    def discover(self) -> None:
        """Add every adapter declared in the entry-point group.

        Names already present win over entry-points. An entry-point that
        fails to import or is not an adapter class is logged and skipped.
        """
        self._discovered = True
        for ep in importlib.metadata.entry_points(group=self._group):
            if ep.name in self._classes:
                continue
            try:
                cls = ep.load()
                self._check(ep.name, cls)
            except Exception:
                logger.warning("Skipping provider entry-point %r", ep.name, exc_info=True)
                continue
            self._classes[ep.name] = cls
            logger.debug("Discovered provider %r -> %r", ep.name, cls)

    def names(self) -> list[str]:
        """Known provider ids, sorted."""
        return sorted(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __repr__(self) -> str:
        return f"ProviderRegistry({self._base_class.__name__}, providers={self.names()})"

    def _check(self, name: str, cls: object) -> None:
        if not (isinstance(cls, type) and issubclass(cls, self._base_class)):
            raise TypeError(
                f"Provider {name!r} must be a {self._base_class.__name__} subclass, got {cls!r}"
            )


__all__ = ["ENTRY_POINT_GROUP", "ProviderNotFoundError", "ProviderRegistry"]
