from fastapi import APIRouter, Depends

from hyenescores.api.deps import get_store
from hyenescores.services import DocumentAssembler
from hyenescores.store import TableStore

router = APIRouter(prefix="/data", tags=["data"])


@router.get("")
async def get_league_data(store: TableStore | None = Depends(get_store)):
    """
    Full league document (managers, seasons, matchday blocks, palmares,
    pantheon, penalties). Always answers; unreadable collections come back empty.
    """
    assembler = DocumentAssembler(store)
    document = await assembler.fetch_document()
    return document.to_json_dict()
