"""Admin operator account endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import require_owner
from src.db import get_db
from src.models import AuditAction, User, UserRole
from src.schemas.user import OperatorCreate, OperatorResponse, OperatorUpdate
from src.services.record_store import check_operator
from src.utils.audit import get_client_ip, log_action
from src.utils.password import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/operators")


@router.get("/list")
async def list_operators(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
):
    """All operator accounts."""
    result = await db.execute(
        select(User)
        .where(User.role == UserRole.OPERATOR)
        .order_by(User.operator_code)
    )
    operators = result.scalars().all()
    return {"items": [OperatorResponse.model_validate(op) for op in operators]}


@router.post("/create", response_model=OperatorResponse)
async def create_operator(
    request: Request,
    data: OperatorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
):
    """Create a login for one roster operator."""
    check_operator(data.operator_code)

    existing = await db.execute(
        select(User).where(
            (User.username == data.username) | (User.operator_code == data.operator_code)
        )
    )
    if existing.scalars().first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or operator already has an account",
        )

    operator = User(
        username=data.username,
        password_hash=hash_password(data.password),
        role=UserRole.OPERATOR,
        display_name=data.display_name,
        operator_code=data.operator_code,
        is_active=True,
    )
    db.add(operator)
    await db.flush()
    await db.refresh(operator)

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.CREATE_OPERATOR,
        target_type="user",
        target_id=operator.id,
        action_metadata={"operator_code": operator.operator_code},
        ip_address=get_client_ip(request),
    )
    logger.info(f"Operator account created: {operator.username} ({operator.operator_code})")

    return OperatorResponse.model_validate(operator)


@router.put("/{user_id}", response_model=OperatorResponse)
async def update_operator(
    request: Request,
    user_id: int,
    data: OperatorUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_owner),
):
    """Rename, (de)activate or reset the password of an operator."""
    operator = await db.get(User, user_id)
    if not operator or operator.role != UserRole.OPERATOR:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Operator not found",
        )

    if data.display_name is not None:
        operator.display_name = data.display_name
    if data.is_active is not None:
        operator.is_active = data.is_active
    if data.password is not None:
        operator.password_hash = hash_password(data.password)

    await db.flush()
    await db.refresh(operator)

    await log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.UPDATE_OPERATOR,
        target_type="user",
        target_id=operator.id,
        action_metadata=data.model_dump(exclude={"password"}, exclude_unset=True),
        ip_address=get_client_ip(request),
    )

    return OperatorResponse.model_validate(operator)
