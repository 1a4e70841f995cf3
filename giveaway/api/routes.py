from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from giveaway.api.schemas import FieldBlur, FieldUpdate, FormView
from giveaway.core.controller import EntryController
from giveaway.store.sessions import SessionNotFound, SessionRegistry, get_registry

router = APIRouter(prefix="/api/entries", tags=["entries"])


def _controller(session_id: str, registry: SessionRegistry) -> EntryController:
    try:
        return registry.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Entry session not found or expired")


def _view(ctrl: EntryController, state=None) -> FormView:
    return FormView.from_state(ctrl.sessionId, state if state is not None else ctrl.state)


@router.post("", response_model=FormView, status_code=201)
def create_entry(registry: SessionRegistry = Depends(get_registry)):
    return _view(registry.create())


@router.get("/{session_id}", response_model=FormView)
def get_entry(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    return _view(_controller(session_id, registry))


@router.put("/{session_id}/fields", response_model=FormView)
def update_field(session_id: str, body: FieldUpdate, registry: SessionRegistry = Depends(get_registry)):
    ctrl = _controller(session_id, registry)
    return _view(ctrl, ctrl.edit(body.field, body.value))


# Blur, verify and submit may make a remote call; keep them off the event loop.
@router.post("/{session_id}/blur", response_model=FormView)
async def blur_field(session_id: str, body: FieldBlur, registry: SessionRegistry = Depends(get_registry)):
    ctrl = _controller(session_id, registry)
    state = await run_in_threadpool(ctrl.blur, body.field)
    return _view(ctrl, state)


@router.post("/{session_id}/verify", response_model=FormView)
async def verify_order(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    """Advance from the order-id page: verifies the order unless already verified."""
    ctrl = _controller(session_id, registry)
    state = await run_in_threadpool(ctrl.verify)
    return _view(ctrl, state)


@router.post("/{session_id}/submit", response_model=FormView)
async def submit_entry(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    ctrl = _controller(session_id, registry)
    state = await run_in_threadpool(ctrl.submit)
    return _view(ctrl, state)


@router.delete("/{session_id}", status_code=204)
def delete_entry(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    if not registry.drop(session_id):
        raise HTTPException(status_code=404, detail="Entry session not found or expired")
