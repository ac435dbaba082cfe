from __future__ import annotations

from typing import AsyncIterator

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from timeledger.application import get_task_service
from timeledger.core.observability import reset_log_company, set_log_company
from timeledger.core.schema import (
    CustomerProjectInactiveParams,
    CustomerProjectUpdateParams,
    TaskCreateParams,
    TaskListWithType,
    TaskUpdateParams,
)

router = APIRouter(prefix="/task", tags=["task"])


async def current_company(x_company: str | None = Header(default=None)) -> AsyncIterator[str]:
    """Company of the authenticated caller, as forwarded by the identity provider."""
    if not x_company:
        raise HTTPException(status_code=401, detail="authentication required")
    token = set_log_company(x_company)
    try:
        yield x_company
    finally:
        reset_log_company(token)


@router.get("/customer")
def list_customers(company: str = Depends(current_company)) -> list[str]:
    return get_task_service().list_customers(company)


@router.get("/project")
def list_projects(customer: str = Query(...), company: str = Depends(current_company)) -> list[str]:
    return get_task_service().list_projects(company, customer)


@router.get("/task")
def list_tasks(
    customer: str = Query(...),
    project: str = Query(...),
    company: str = Depends(current_company),
) -> list[str]:
    return get_task_service().list_tasks(company, customer, project)


@router.get("/task-with-type")
def list_tasks_with_type(
    customer: str = Query(...),
    project: str = Query(...),
    company: str = Depends(current_company),
) -> dict:
    tasks, project_type = get_task_service().read_with_type(company, customer, project)
    return TaskListWithType(tasks=tasks, project_type=project_type).model_dump(by_alias=True)


@router.post("/task", status_code=204)
def create_task(payload: TaskCreateParams, company: str = Depends(current_company)) -> None:
    get_task_service().create_task(
        company,
        payload.customer,
        payload.project,
        project_type=payload.project_type,
        task=payload.task,
    )


@router.put("/customer-project", status_code=204)
def update_customer_project(
    payload: CustomerProjectUpdateParams,
    company: str = Depends(current_company),
) -> None:
    get_task_service().update_customer_project(
        company,
        payload.customer,
        payload.project,
        new_customer=payload.new_customer,
        new_project=payload.new_project,
    )


@router.put("/task", status_code=204)
def update_task(payload: TaskUpdateParams, company: str = Depends(current_company)) -> None:
    get_task_service().update_task(
        company,
        payload.customer,
        payload.project,
        task=payload.task,
        new_task=payload.new_task,
    )


@router.put("/customer-project/inactive", status_code=204)
def set_customer_project_inactive(
    payload: CustomerProjectInactiveParams,
    company: str = Depends(current_company),
) -> None:
    get_task_service().set_customer_project_inactive(
        company,
        payload.customer,
        payload.project,
        inactive=payload.inactive,
    )
