from typing import Any

from fastapi import APIRouter, Body, Depends

from hyenescores.api.deps import get_store
from hyenescores.services import BulkImporter, ImportResult, RecordPersister
from hyenescores.store import TableStore

router = APIRouter(prefix="/import", tags=["admin-import"])


@router.post("", response_model=ImportResult)
async def import_document(
    document: dict[str, Any] = Body(...),
    store: TableStore | None = Depends(get_store),
):
    """
    Import a full league document (an export of GET /data, or an older
    export using the abbreviated game fields).
    """
    importer = BulkImporter(RecordPersister(store))
    return await importer.import_document(document)
