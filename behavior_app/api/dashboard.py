from fastapi import APIRouter, Depends

from behavior_app.api.deps import get_current_teacher
from behavior_app.services.dashboard import get_dashboard_data
from behavior_app.services.store import TableStore, get_store

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(get_current_teacher)])


@router.get("")
def dashboard(store: TableStore = Depends(get_store)):
    return get_dashboard_data(store)
