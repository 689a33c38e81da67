"""Operator panel: daily ad data entries."""

import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import can_edit_operator, require_operator
from src.db import get_db
from src.models import AuditAction, User
from src.schemas.ad_entry import AdEntryCreate, AdEntryResponse, AdEntryUpdate
from src.services import record_store
from src.utils.audit import get_client_ip, log_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries")


def _forbid_other_operator(user: User, operator: str) -> None:
    if not can_edit_operator(user, operator):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Operators can only change their own entries",
        )


@router.get("", response_model=List[AdEntryResponse])
async def list_entries(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
    start: Optional[datetime.date] = Query(None),
    end: Optional[datetime.date] = Query(None),
    operator: Optional[str] = Query(None),
):
    """Daily entries, newest first."""
    rows = await record_store.list_entries(
        db,
        start=start,
        end=end,
        operators=[operator] if operator else None,
    )
    return [AdEntryResponse.model_validate(row) for row in rows]


@router.post("", response_model=AdEntryResponse)
async def submit_entry(
    request: Request,
    data: AdEntryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
):
    """Create the day's entry, or overwrite it if one exists."""
    _forbid_other_operator(current_user, data.staff)

    entry, created = await record_store.upsert_entry(db, data, user_id=current_user.id)

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.CREATE_ENTRY if created else AuditAction.UPDATE_ENTRY,
        target_type="entry",
        target_id=entry.id,
        action_metadata={"date": entry.date.isoformat(), "staff": entry.staff},
        ip_address=get_client_ip(request),
    )

    return AdEntryResponse.model_validate(entry)


@router.put("/{entry_id}", response_model=AdEntryResponse)
async def update_entry(
    request: Request,
    entry_id: int,
    data: AdEntryUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
):
    """Edit an existing entry."""
    entry = await record_store.get_entry(db, entry_id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entry not found",
        )
    _forbid_other_operator(current_user, entry.staff)

    entry = await record_store.update_entry(db, entry, data)

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.UPDATE_ENTRY,
        target_type="entry",
        target_id=entry.id,
        action_metadata=data.model_dump(mode="json", exclude_unset=True),
        ip_address=get_client_ip(request),
    )

    return AdEntryResponse.model_validate(entry)


@router.delete("/{entry_id}")
async def delete_entry(
    request: Request,
    entry_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_operator),
):
    entry = await record_store.get_entry(db, entry_id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entry not found",
        )
    _forbid_other_operator(current_user, entry.staff)

    metadata = {"date": entry.date.isoformat(), "staff": entry.staff}
    await record_store.delete_entry(db, entry)

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.DELETE_ENTRY,
        target_type="entry",
        target_id=entry_id,
        action_metadata=metadata,
        ip_address=get_client_ip(request),
    )

    return {"success": True}
