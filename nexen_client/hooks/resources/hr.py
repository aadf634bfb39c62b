"""HR bindings: employees, departments and leave approval."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.schemas import Record


class HrHooks(ResourceHooks):
    domain = "hr"
    mutations = (
        "create_employee",
        "update_employee",
        "delete_employee",
        "create_department",
        "update_department",
        "delete_department",
        "approve_leave_request",
        "reject_leave_request",
    )

    def stats(self) -> Query:
        return self.query(QueryKeys.hr.key("stats"), "/hr/stats")

    def summary(self) -> Query:
        return self.query(QueryKeys.hr.key("summary"), "/hr/summary")

    def employees(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.hr_employees.list(params), "/hr/employees", params=params, model=list_of(Record)
        )

    def employee(self, employee_id: int | None) -> Query:
        return self.query(
            QueryKeys.hr_employees.detail(employee_id),
            f"/hr/employees/{employee_id}",
            model=Record,
            enabled=bool(employee_id),
        )

    def departments(self) -> Query:
        return self.query(QueryKeys.hr_departments.list(), "/hr/departments", model=list_of(Record))

    def leave_requests(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.hr_leave_requests.list(params),
            "/hr/leave-requests",
            params=params,
            model=list_of(Record),
        )

    def create_employee(self) -> Mutation:
        return self.mutation("create_employee", "POST", "/hr/employees")

    def update_employee(self) -> Mutation:
        return self.mutation("update_employee", "PUT", "/hr/employees/{id}")

    def delete_employee(self) -> Mutation:
        return self.mutation("delete_employee", "DELETE", "/hr/employees/{id}")

    def create_department(self) -> Mutation:
        return self.mutation("create_department", "POST", "/hr/departments")

    def update_department(self) -> Mutation:
        return self.mutation("update_department", "PUT", "/hr/departments/{id}")

    def delete_department(self) -> Mutation:
        return self.mutation("delete_department", "DELETE", "/hr/departments/{id}")

    def approve_leave_request(self) -> Mutation:
        return self.mutation("approve_leave_request", "POST", "/hr/leave-requests/{id}/approve")

    def reject_leave_request(self) -> Mutation:
        return self.mutation("reject_leave_request", "POST", "/hr/leave-requests/{id}/reject")
