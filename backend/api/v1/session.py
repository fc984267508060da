# backend/api/v1/session.py

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import PlainTextResponse

from api.dependencies import get_session_machine
from core.session_machine import SessionMachine
from models.session_models import (
    ApiKeyRequest,
    AttachmentUploadResponse,
    ResultTab,
    SessionInputRequest,
    SessionView,
)

router = APIRouter()


@router.get("/session", response_model=SessionView)
def read_session(machine: SessionMachine = Depends(get_session_machine)):
    return machine.view()


@router.put("/session/input", response_model=SessionView)
def update_session_input(request: SessionInputRequest, machine: SessionMachine = Depends(get_session_machine)):
    machine.update_input(idea=request.idea, style=request.style, creativity=request.creativity)
    return machine.view()


@router.post("/session/attachments", response_model=AttachmentUploadResponse)
async def upload_attachments(
    files: List[UploadFile] = File(...),
    machine: SessionMachine = Depends(get_session_machine),
):
    """
    Accepts images and PDFs. Unsupported files are skipped and reported
    as warnings; the rest are appended to the draft.
    """
    warnings = await machine.add_attachments(files)
    return AttachmentUploadResponse(session=machine.view(), warnings=warnings)


@router.delete("/session/attachments/{index}", response_model=SessionView)
def remove_attachment(index: int, machine: SessionMachine = Depends(get_session_machine)):
    try:
        machine.remove_attachment(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return machine.view()


@router.post("/session/generate", response_model=SessionView)
async def generate_super_prompt(machine: SessionMachine = Depends(get_session_machine)):
    """
    Stage 1. Validation and service errors come back inline in the view
    (error / error_kind), never as HTTP errors.
    """
    await machine.generate()
    return machine.view()


@router.post("/session/execute", response_model=SessionView)
async def execute_super_prompt(machine: SessionMachine = Depends(get_session_machine)):
    """Stage 2. Same inline error contract as /session/generate."""
    await machine.execute()
    return machine.view()


@router.post("/session/new", response_model=SessionView)
def new_project(machine: SessionMachine = Depends(get_session_machine)):
    machine.new_project()
    return machine.view()


@router.get("/session/export")
def export_session(tab: ResultTab = ResultTab.PROMPT, machine: SessionMachine = Depends(get_session_machine)):
    filename, content = machine.export_markdown(tab)
    if not content:
        raise HTTPException(status_code=404, detail=f"Nothing to export on the {tab.value} tab.")
    return PlainTextResponse(
        content,
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.put("/settings/api-key", response_model=SessionView)
def save_api_key(request: ApiKeyRequest, machine: SessionMachine = Depends(get_session_machine)):
    machine.set_api_key(request.api_key)
    return machine.view()
