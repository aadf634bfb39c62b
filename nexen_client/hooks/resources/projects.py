"""Project bindings: projects and their tasks."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.schemas import Record


class ProjectHooks(ResourceHooks):
    domain = "projects"
    mutations = (
        "create_project",
        "update_project",
        "delete_project",
        "create_task",
        "update_task",
        "delete_task",
    )

    def stats(self) -> Query:
        return self.query(QueryKeys.projects.key("stats"), "/projects/stats")

    def projects(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.projects_projects.list(params), "/projects", params=params, model=list_of(Record)
        )

    def project(self, project_id: int | None) -> Query:
        return self.query(
            QueryKeys.projects_projects.detail(project_id),
            f"/projects/{project_id}",
            model=Record,
            enabled=bool(project_id),
        )

    def tasks(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.projects_tasks.list(params), "/projects/tasks", params=params, model=list_of(Record)
        )

    def create_project(self) -> Mutation:
        return self.mutation("create_project", "POST", "/projects")

    def update_project(self) -> Mutation:
        return self.mutation("update_project", "PUT", "/projects/{id}")

    def delete_project(self) -> Mutation:
        return self.mutation("delete_project", "DELETE", "/projects/{id}")

    def create_task(self) -> Mutation:
        return self.mutation("create_task", "POST", "/projects/tasks")

    def update_task(self) -> Mutation:
        return self.mutation("update_task", "PUT", "/projects/tasks/{id}")

    def delete_task(self) -> Mutation:
        return self.mutation("delete_task", "DELETE", "/projects/tasks/{id}")
