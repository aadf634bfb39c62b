"""Base class for per-domain hook bindings.

Each binding handles a single API domain and turns its endpoints into read
queries and write mutations. Reads resolve to the envelope's ``data``; writes
resolve to the whole envelope so callers can show the server message.

Write variables are a mapping. Path placeholders (``/suppliers/{id}``) are
filled from it and the remaining entries become the JSON body.
"""

from __future__ import annotations

import logging
import string
from collections.abc import Mapping
from typing import Any, List, Union

from pydantic import BaseModel

from nexen_client.cache.keys import QueryKey
from nexen_client.cache.store import QueryCache
from nexen_client.config.invalidation_rules import InvalidationTable
from nexen_client.config.settings import ClientSettings
from nexen_client.errors import ConfigurationError
from nexen_client.hooks.mutation import Mutation, SuccessCallback
from nexen_client.hooks.query import Query
from nexen_client.integration.api_client import ApiClient
from nexen_client.models.responses import Page

logger = logging.getLogger(__name__)

_FORMATTER = string.Formatter()


def list_of(item: type) -> Any:
    """Payload type for list endpoints: a page object or a bare list."""
    return Union[Page[item], List[item]]


def _path_fields(template: str) -> set[str]:
    return {name for _, name, _, _ in _FORMATTER.parse(template) if name}


class ResourceHooks:
    """Base binding that all domain bindings extend.

    Subclasses MUST set ``domain`` and list every mutation identity they bind
    in ``mutations``; each identity needs a rule in the invalidation table.
    """

    domain: str = ""
    mutations: tuple[str, ...] = ()

    def __init__(
        self,
        client: ApiClient,
        cache: QueryCache,
        rules: InvalidationTable,
        settings: ClientSettings | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.rules = rules
        self.settings = settings

    def query(
        self,
        key: QueryKey,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        model: Any = Any,
        enabled: bool = True,
        **options: Any,
    ) -> Query:
        """Bind a GET endpoint to *key*."""
        client = self.client

        async def fetcher() -> Any:
            envelope = await client.get(path, params=params, model=model)
            return envelope.data

        return Query(self.cache, key, fetcher, enabled=enabled, **options)

    def mutation(
        self,
        name: str,
        method: str,
        path: str,
        *,
        model: Any = Any,
        body: type[BaseModel] | None = None,
        as_params: bool = False,
        on_success: SuccessCallback | None = None,
    ) -> Mutation:
        """Bind a write endpoint to the mutation identity *name*.

        Parameters
        ----------
        body:
            Optional request model the remaining variables are validated into.
        as_params:
            Send the remaining variables as query parameters instead of a body.
        """
        client = self.client
        path_fields = _path_fields(path)

        async def send(variables: Any) -> Any:
            values = dict(variables or {})
            missing = sorted(f for f in path_fields if values.get(f) is None)
            if missing:
                raise ConfigurationError(
                    f"Mutation '{name}' needs {', '.join(missing)} in its variables",
                    mutation=name,
                )
            url = path.format(**{f: values.pop(f) for f in path_fields})
            if body is not None:
                values = body.model_validate(values).model_dump(mode="json", exclude_none=True)
            if as_params:
                return await client.request(method, url, params=values, model=model)
            payload = values if values and method.upper() != "DELETE" else None
            return await client.request(method, url, json=payload, model=model)

        return Mutation(name, send, cache=self.cache, rules=self.rules, on_success=on_success)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(domain={self.domain!r})"
