# backend/api/v1/history.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_session_machine
from core.prompt_architect import get_prompt_examples
from core.session_machine import SessionMachine, HistoryEntryNotFoundError
from models.session_models import HistoryEntry, PromptExample, SessionView

router = APIRouter()


@router.get("/history", response_model=List[HistoryEntry])
def list_history(machine: SessionMachine = Depends(get_session_machine)):
    """Newest first."""
    return machine.history.entries()


@router.post("/history/{entry_id}/load", response_model=SessionView)
def load_history_entry(entry_id: str, machine: SessionMachine = Depends(get_session_machine)):
    try:
        machine.load_from_history(entry_id)
    except HistoryEntryNotFoundError:
        raise HTTPException(status_code=404, detail=f"History entry {entry_id} not found")
    return machine.view()


@router.delete("/history/{entry_id}", response_model=SessionView)
def delete_history_entry(entry_id: str, machine: SessionMachine = Depends(get_session_machine)):
    """Permanent, there is no undo."""
    try:
        machine.delete_history_entry(entry_id)
    except HistoryEntryNotFoundError:
        raise HTTPException(status_code=404, detail=f"History entry {entry_id} not found")
    return machine.view()


@router.get("/examples", response_model=List[PromptExample])
def list_examples():
    return get_prompt_examples()
