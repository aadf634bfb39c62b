"""Authentication bindings: session user, login, logout and profile."""

from __future__ import annotations

import logging
from typing import Any

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks
from nexen_client.models.requests import Credentials
from nexen_client.models.responses import Envelope
from nexen_client.models.schemas import AuthPayload

logger = logging.getLogger(__name__)


class AuthHooks(ResourceHooks):
    domain = "auth"
    mutations = ("login", "register", "logout", "update_profile", "change_password")

    def me(self) -> Query:
        return self.query(QueryKeys.auth.key("me"), "/user", enabled=self.client.session.is_authenticated)

    def login(self) -> Mutation:
        return self.mutation(
            "login", "POST", "/login", model=AuthPayload, body=Credentials, on_success=self._store_session
        )

    def register(self) -> Mutation:
        return self.mutation("register", "POST", "/register", model=AuthPayload, on_success=self._store_session)

    def logout(self) -> Mutation:
        return self.mutation("logout", "POST", "/logout", on_success=self._drop_session)

    def update_profile(self) -> Mutation:
        return self.mutation("update_profile", "POST", "/profile")

    def change_password(self) -> Mutation:
        return self.mutation("change_password", "POST", "/change-password")

    def _store_session(self, envelope: Envelope, variables: Any) -> None:
        payload = envelope.data
        if not isinstance(payload, AuthPayload) or not payload.token:
            logger.warning("Authentication response carried no token")
            return
        user = payload.user.model_dump() if payload.user is not None else None
        self.client.session.set(payload.token, user)

    def _drop_session(self, envelope: Envelope, variables: Any) -> None:
        self.client.session.clear()
