"""The configuration sink contract and the pass-local error sink."""

import logging
from typing import Any, Iterator, Optional, Protocol

from graft.domain import BindingKey, ConfigurationProblem, ProblemKind, Provenance, ProviderMethod
from graft.errors import ConfigurationFailed

__all__ = ["ConfigurationSink", "ErrorSink"]

logger = logging.getLogger(__name__)


class ConfigurationSink(Protocol):
    """What a configuration pass needs from the host container."""

    def add_error(self, message: str, source: Any) -> None:
        ...

    def install_binding(
        self, key: BindingKey, producer: ProviderMethod, provenance: Provenance
    ) -> None:
        ...

    def install_set_contribution(
        self, element_key: BindingKey, producer: ProviderMethod, provenance: Provenance
    ) -> None:
        ...


class ErrorSink:
    """Append-only, ordered collection of the problems found during one pass."""

    def __init__(self):
        self._problems: list[ConfigurationProblem] = []

    def add(self, problem: ConfigurationProblem):
        logger.debug("Configuration problem: %s", problem.message)
        self._problems.append(problem)

    def add_error(
        self, message: str, source: Any, kind: Optional[ProblemKind] = None
    ):
        self.add(ConfigurationProblem(message, source, kind))

    def extend(self, problems):
        for problem in problems:
            self.add(problem)

    @property
    def problems(self) -> tuple[ConfigurationProblem, ...]:
        return tuple(self._problems)

    def raise_if_failed(self):
        """Raise :class:`ConfigurationFailed` if any problem was collected."""
        if self._problems:
            raise ConfigurationFailed(self._problems)

    def __len__(self) -> int:
        return len(self._problems)

    def __iter__(self) -> Iterator[ConfigurationProblem]:
        return iter(tuple(self._problems))
