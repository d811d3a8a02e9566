"""Service info and health probe."""

from fastapi import APIRouter, Depends

from employee_manager.infrastructure.database import ReadyState
from employee_manager.interfaces.deps import get_store

router = APIRouter(tags=["Health"])


@router.get("/")
def root():
    return {
        "name": "Employee Manager",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@router.get("/health")
def health(store=Depends(get_store)):
    state = ReadyState(store.ready_state)
    return {
        "status": "healthy" if state == ReadyState.CONNECTED else "unhealthy",
        "store": {"status": state.label, "readyState": int(state)},
        "server": "running",
    }
