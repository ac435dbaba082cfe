from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Params(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TaskCreateParams(_Params):
    customer: str
    project: str
    project_type: str = Field(default="", alias="projectType")
    task: str


class CustomerProjectUpdateParams(_Params):
    customer: str
    project: str
    new_customer: str | None = Field(default=None, alias="newCustomer")
    new_project: str | None = Field(default=None, alias="newProject")


class TaskUpdateParams(_Params):
    customer: str
    project: str
    task: str
    new_task: str | None = Field(default=None, alias="newTask")


class CustomerProjectInactiveParams(_Params):
    customer: str
    project: str
    # omitted means retire; an explicit false reactivates
    inactive: bool = True


class TaskListWithType(_Params):
    tasks: list[str]
    project_type: str = Field(serialization_alias="projectType")
