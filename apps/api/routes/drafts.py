"""
API route: Drafts (the single working summary being edited)
"""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response

from apps.worker.lib.editor import (
    add_investigation,
    add_treatment,
    apply_update,
    remove_investigation,
    remove_treatment,
    reset_data,
    update_investigation,
    update_treatment,
)
from packages.shared.models import DischargeData, FieldUpdateRequest, InvestigationUpdate, TreatmentUpdate
from packages.shared.storage import clear_draft, load_draft, save_draft

router = APIRouter(prefix="/drafts/current", tags=["drafts"])


def _current() -> DischargeData:
    return load_draft() or reset_data()


@router.get("", response_model=DischargeData)
def get_draft():
    """Return the saved draft, or a blank summary when none is saved."""
    return _current()


@router.put("", response_model=DischargeData)
def put_draft(data: DischargeData):
    save_draft(data)
    return data


@router.patch("", response_model=DischargeData)
def patch_draft(update: FieldUpdateRequest):
    """Apply one field update to the saved draft."""
    data = apply_update(_current(), update.root)
    save_draft(data)
    return data


@router.delete("", status_code=204)
def delete_draft():
    clear_draft()
    return Response(status_code=204)


@router.post("/investigations", response_model=DischargeData, status_code=201)
def post_investigation():
    data, _ = add_investigation(_current())
    save_draft(data)
    return data


@router.patch("/investigations", response_model=DischargeData)
def patch_investigation(update: InvestigationUpdate):
    try:
        data = update_investigation(_current(), update)
    except KeyError:
        raise HTTPException(status_code=404, detail="Investigation not found")
    save_draft(data)
    return data


@router.delete("/investigations/{entry_id}", response_model=DischargeData)
def delete_investigation(entry_id: str):
    try:
        data = remove_investigation(_current(), entry_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Investigation not found")
    save_draft(data)
    return data


@router.post("/treatments", response_model=DischargeData, status_code=201)
def post_treatment():
    data, _ = add_treatment(_current())
    save_draft(data)
    return data


@router.patch("/treatments", response_model=DischargeData)
def patch_treatment(update: TreatmentUpdate):
    try:
        data = update_treatment(_current(), update)
    except KeyError:
        raise HTTPException(status_code=404, detail="Treatment not found")
    save_draft(data)
    return data


@router.delete("/treatments/{entry_id}", response_model=DischargeData)
def delete_treatment(entry_id: str):
    try:
        data = remove_treatment(_current(), entry_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Treatment not found")
    save_draft(data)
    return data
