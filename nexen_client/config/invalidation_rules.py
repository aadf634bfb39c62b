"""Invalidation rule models and YAML loader.

Each mutation the client can perform is bound to one declarative rule that
says which query-key prefixes go stale when the mutation succeeds. Rules are
loaded once from YAML into typed Pydantic models; a malformed table raises
``ConfigurationError`` at load time.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from nexen_client.cache.keys import QueryKey, entity_id
from nexen_client.errors import ConfigurationError, UnknownMutationError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"^\{(\w+)\}$")

Segment = Union[str, int]


class InvalidationRule(BaseModel):
    """What a single successful mutation invalidates."""

    mutation: str
    invalidates: List[List[Segment]] = Field(default_factory=list)
    invalidates_nothing: bool = False
    clears_cache: bool = False
    reason: str | None = None

    @model_validator(mode="after")
    def _exactly_one_effect(self) -> InvalidationRule:
        declared = sum([bool(self.invalidates), self.invalidates_nothing, self.clears_cache])
        if declared != 1:
            raise ValueError(
                "declare exactly one of 'invalidates', 'invalidates_nothing' or 'clears_cache'"
            )
        if self.invalidates_nothing and not self.reason:
            raise ValueError("'invalidates_nothing' needs a 'reason'")
        if any(not prefix for prefix in self.invalidates):
            raise ValueError("invalidation prefixes must not be empty")
        return self

    def resolve(self, variables: Any = None) -> list[QueryKey]:
        """Return the concrete key prefixes for one mutation call.

        ``{name}`` segments are filled from *variables*, which must then be a
        mapping holding ``name``.
        """
        return [self._fill(prefix, variables) for prefix in self.invalidates]

    def _fill(self, prefix: list[Segment], variables: Any) -> QueryKey:
        segments: list[Any] = []
        for segment in prefix:
            match = _PLACEHOLDER.match(segment) if isinstance(segment, str) else None
            if match is None:
                segments.append(segment)
                continue
            name = match.group(1)
            if not isinstance(variables, Mapping) or variables.get(name) is None:
                raise ConfigurationError(
                    f"Mutation '{self.mutation}' needs '{name}' in its variables",
                    mutation=self.mutation,
                    placeholder=name,
                )
            segments.append(entity_id(variables[name]))
        return tuple(segments)


class InvalidationTable:
    """Lookup of invalidation rules by mutation identity."""

    def __init__(self, rules: Mapping[str, InvalidationRule] | None = None) -> None:
        self._rules: dict[str, InvalidationRule] = dict(rules or {})

    def get(self, mutation: str) -> InvalidationRule:
        """Return the rule for *mutation*.

        Raises
        ------
        UnknownMutationError
            If no rule is declared for *mutation*.
        """
        try:
            return self._rules[mutation]
        except KeyError:
            raise UnknownMutationError(
                f"No invalidation rule declared for mutation '{mutation}'",
                mutation=mutation,
            ) from None

    def names(self) -> list[str]:
        return sorted(self._rules)

    def __contains__(self, mutation: object) -> bool:
        return mutation in self._rules

    def __len__(self) -> int:
        return len(self._rules)


def load_invalidation_rules(yaml_path: str | Path) -> InvalidationTable:
    """Parse an invalidation rules YAML file into an InvalidationTable.

    Args:
        yaml_path: Path to the YAML configuration file.

    Raises:
        ConfigurationError: the file is missing, is not valid YAML, lacks a
            ``mutations`` mapping, or holds an invalid rule.
    """
    path = Path(yaml_path)

    if not path.exists():
        raise ConfigurationError(f"Invalidation rules file not found at {path}", path=str(path))

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Failed to parse invalidation rules YAML at {path}: {exc}", path=str(path)
        ) from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("mutations"), dict):
        raise ConfigurationError(
            "Invalidation rules YAML missing 'mutations' mapping", path=str(path)
        )

    rules: dict[str, InvalidationRule] = {}
    for name, config in raw["mutations"].items():
        try:
            rules[name] = InvalidationRule.model_validate({**(config or {}), "mutation": name})
        except (ValidationError, TypeError) as exc:
            raise ConfigurationError(
                f"Invalid invalidation rule for mutation '{name}': {exc}",
                path=str(path),
                mutation=name,
            ) from exc

    logger.info("Loaded %d invalidation rules from %s", len(rules), path)
    return InvalidationTable(rules)
