from fastapi import APIRouter, Depends

from behavior_app.api.deps import get_current_teacher
from behavior_app.schemas.infractions import InfractionCreateRequest
from behavior_app.services import infractions
from behavior_app.services.store import TableStore, get_store

router = APIRouter(prefix="/infractions", tags=["infractions"], dependencies=[Depends(get_current_teacher)])


@router.post("")
def save_infraction(payload: InfractionCreateRequest, store: TableStore = Depends(get_store)):
    return infractions.save_infraction(store, payload)
