"""CRM bindings: contacts, opportunities and summaries."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.schemas import Contact, ExportFile, Record


class CrmHooks(ResourceHooks):
    domain = "crm"
    mutations = (
        "create_contact",
        "update_contact",
        "delete_contact",
        "create_opportunity",
        "update_opportunity",
        "export_contacts",
    )

    def stats(self) -> Query:
        # The API serves CRM stats from the summary endpoint.
        return self.query(QueryKeys.crm.key("stats"), "/crm/summary")

    def summary(self) -> Query:
        return self.query(QueryKeys.crm.key("summary"), "/crm/summary")

    def contacts(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.crm_contacts.list(params),
            "/crm/contacts",
            params=params,
            model=list_of(Contact),
        )

    def contact(self, contact_id: int | None) -> Query:
        return self.query(
            QueryKeys.crm_contacts.detail(contact_id),
            f"/crm/contacts/{contact_id}",
            model=Contact,
            enabled=bool(contact_id),
        )

    def contact_types(self) -> Query:
        return self.query(QueryKeys.crm.key("contact-types"), "/crm/contact-types")

    def opportunities(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.crm_opportunities.list(params),
            "/crm/opportunities",
            params=params,
            model=list_of(Record),
        )

    def create_contact(self) -> Mutation:
        return self.mutation("create_contact", "POST", "/crm/contacts", model=Contact)

    def update_contact(self) -> Mutation:
        return self.mutation("update_contact", "PUT", "/crm/contacts/{id}", model=Contact)

    def delete_contact(self) -> Mutation:
        return self.mutation("delete_contact", "DELETE", "/crm/contacts/{id}")

    def create_opportunity(self) -> Mutation:
        return self.mutation("create_opportunity", "POST", "/crm/opportunities")

    def update_opportunity(self) -> Mutation:
        return self.mutation("update_opportunity", "PUT", "/crm/opportunities/{id}")

    def export_contacts(self) -> Mutation:
        return self.mutation(
            "export_contacts", "GET", "/crm/contacts/export", model=ExportFile, as_params=True
        )
