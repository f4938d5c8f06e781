"""DAO Routes — HTTP surface over DaoService.

Invariants:
    - Handlers only translate HTTP <-> service calls; no business rules here
    - Not-found and validation failures raised as DaoManagerError, mapped by error_handlers
    - Collection routes (/stats, /search, ...) declared before /{dao_id}
"""

from fastapi import APIRouter, Depends, Query, Response, status

from dao_manager.api.dependencies import get_dao_service
from dao_manager.schemas.dao import (
    CloneOverrides, Dao, DaoCreate, DaoFilters, DaoStats, DaoSummary, DaoTask,
    DaoUpdate, TaskApplicability, TaskAssignment, TaskDistributionEntry,
    TaskGlobalProgress, TaskProgressUpdate, TaskUpdate, TeamMemberCreate,
    TeamMemberUpdate,
)
from dao_manager.services.dao_service import DaoService

router = APIRouter(prefix="/api/v1/daos", tags=["daos"])


# ─── Collection ─────────────────────────────────────────────────

@router.get("", response_model=list[Dao])
async def list_daos(service: DaoService = Depends(get_dao_service)):
    return await service.get_all_daos()


@router.post("", response_model=Dao, status_code=status.HTTP_201_CREATED)
async def create_dao(body: DaoCreate, service: DaoService = Depends(get_dao_service)):
    return await service.create_dao(body)


@router.get("/stats", response_model=DaoStats)
async def get_stats(service: DaoService = Depends(get_dao_service)):
    return await service.get_dao_stats()


@router.get("/task-progress", response_model=list[TaskGlobalProgress])
async def get_task_progress(service: DaoService = Depends(get_dao_service)):
    return await service.get_task_global_progress()


@router.get("/search", response_model=list[Dao])
async def search_daos(
    q: str = Query("", max_length=200),
    service: DaoService = Depends(get_dao_service),
):
    return await service.search_daos(q)


@router.post("/filter", response_model=list[Dao])
async def filter_daos(body: DaoFilters, service: DaoService = Depends(get_dao_service)):
    return await service.get_filtered_daos(body)


@router.get("/next-number")
async def next_number(service: DaoService = Depends(get_dao_service)):
    return {"numeroListe": await service.get_next_dao_number()}


@router.post("/cache/invalidate", status_code=status.HTTP_204_NO_CONTENT)
async def invalidate_cache(service: DaoService = Depends(get_dao_service)):
    service.invalidate_cache()


# ─── Single dossier ─────────────────────────────────────────────

@router.get("/{dao_id}", response_model=Dao)
async def get_dao(dao_id: str, service: DaoService = Depends(get_dao_service)):
    return await service.get_dao_by_id(dao_id)


@router.patch("/{dao_id}", response_model=Dao)
async def update_dao(
    dao_id: str, body: DaoUpdate, service: DaoService = Depends(get_dao_service),
):
    return await service.update_dao(
        dao_id, body.model_dump(exclude_unset=True, exclude_none=True),
    )


@router.delete("/{dao_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_dao(dao_id: str, service: DaoService = Depends(get_dao_service)):
    await service.delete_dao(dao_id)


@router.get("/{dao_id}/summary", response_model=DaoSummary)
async def get_summary(dao_id: str, service: DaoService = Depends(get_dao_service)):
    dao = await service.get_dao_by_id(dao_id)
    return service.get_dao_summary(dao)


@router.get("/{dao_id}/distribution", response_model=dict[str, TaskDistributionEntry])
async def get_distribution(dao_id: str, service: DaoService = Depends(get_dao_service)):
    dao = await service.get_dao_by_id(dao_id)
    return service.get_task_distribution(dao)


@router.get("/{dao_id}/export")
async def export_dao(dao_id: str, service: DaoService = Depends(get_dao_service)):
    dao = await service.get_dao_by_id(dao_id)
    return Response(
        content=service.export_dao_to_json(dao), media_type="application/json",
    )


@router.post("/{dao_id}/clone", response_model=Dao, status_code=status.HTTP_201_CREATED)
async def clone_dao(
    dao_id: str,
    body: CloneOverrides | None = None,
    service: DaoService = Depends(get_dao_service),
):
    return await service.clone_dao(dao_id, body)


# ─── Tasks ──────────────────────────────────────────────────────

@router.patch("/{dao_id}/tasks/{task_id}", response_model=Dao)
async def update_task(
    dao_id: str, task_id: int, body: TaskUpdate,
    service: DaoService = Depends(get_dao_service),
):
    return await service.update_task(dao_id, task_id, body.model_dump(exclude_unset=True))


@router.put("/{dao_id}/tasks/{task_id}/progress", response_model=Dao)
async def update_task_progress(
    dao_id: str, task_id: int, body: TaskProgressUpdate,
    service: DaoService = Depends(get_dao_service),
):
    return await service.update_task_progress(dao_id, task_id, body.progress, body.user_id)


@router.put("/{dao_id}/tasks/{task_id}/assignment", response_model=Dao)
async def assign_task(
    dao_id: str, task_id: int, body: TaskAssignment,
    service: DaoService = Depends(get_dao_service),
):
    return await service.assign_task(dao_id, task_id, body.member_id, body.user_id)


@router.put("/{dao_id}/tasks/{task_id}/applicability", response_model=Dao)
async def toggle_applicability(
    dao_id: str, task_id: int, body: TaskApplicability,
    service: DaoService = Depends(get_dao_service),
):
    return await service.toggle_task_applicability(
        dao_id, task_id, body.is_applicable, body.user_id,
    )


# ─── Team ───────────────────────────────────────────────────────

@router.get("/{dao_id}/team/{member_id}/tasks", response_model=list[DaoTask])
async def get_member_tasks(
    dao_id: str, member_id: str, service: DaoService = Depends(get_dao_service),
):
    dao = await service.get_dao_by_id(dao_id)
    return service.get_tasks_assigned_to(dao, member_id)


@router.post("/{dao_id}/team", response_model=Dao, status_code=status.HTTP_201_CREATED)
async def add_team_member(
    dao_id: str, body: TeamMemberCreate, service: DaoService = Depends(get_dao_service),
):
    return await service.add_team_member(dao_id, body)


@router.patch("/{dao_id}/team/{member_id}", response_model=Dao)
async def update_team_member(
    dao_id: str, member_id: str, body: TeamMemberUpdate,
    service: DaoService = Depends(get_dao_service),
):
    return await service.update_team_member(
        dao_id, member_id, body.model_dump(exclude_unset=True, exclude_none=True),
    )


@router.delete("/{dao_id}/team/{member_id}", response_model=Dao)
async def remove_team_member(
    dao_id: str, member_id: str, service: DaoService = Depends(get_dao_service),
):
    return await service.remove_team_member(dao_id, member_id)
