from fastapi import APIRouter, Depends

from hyenescores.api.deps import get_store
from hyenescores.schemas.admin import (
    ManagerRenameRequest,
    ManagerSaveRequest,
    OperationResponse,
    OperationStatus,
)
from hyenescores.services import IdentityRenamer, PartialRenameError, RecordPersister
from hyenescores.store import TableStore

router = APIRouter(prefix="/managers", tags=["admin-managers"])


@router.put("/{manager_id}", response_model=OperationResponse)
async def save_manager(
    manager_id: str,
    payload: ManagerSaveRequest,
    store: TableStore | None = Depends(get_store),
):
    rows = await RecordPersister(store).save_manager(manager_id, payload.name)
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Manager {manager_id} saved",
        details={"rows": rows},
    )


@router.delete("/{manager_id}", response_model=OperationResponse)
async def delete_manager(manager_id: str, store: TableStore | None = Depends(get_store)):
    await RecordPersister(store).delete_manager(manager_id)
    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Manager {manager_id} deleted",
    )


@router.post("/{manager_id}/rename", response_model=OperationResponse)
async def rename_manager(
    manager_id: str,
    payload: ManagerRenameRequest,
    store: TableStore | None = Depends(get_store),
):
    """
    Rename a manager and every row that refers to it by name.

    A partial failure is reported with status "partial" and the failing
    targets; running the same rename again completes it.
    """
    renamer = IdentityRenamer(store)
    try:
        result = await renamer.rename(manager_id, payload.old_name, payload.new_name)
    except PartialRenameError as e:
        return OperationResponse(
            status=OperationStatus.PARTIAL,
            message=e.message,
            details={"failed": e.failed, "succeeded": e.succeeded},
        )

    return OperationResponse(
        status=OperationStatus.SUCCESS,
        message=f"Manager {manager_id} renamed to {payload.new_name}",
        details={"updated_rows": result.updated_rows},
    )
