from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.models import User
from app.schemas.user import UserCreate, UserCreatedResponse, UserResponse
from app.security.jwt import create_access_token

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a user and issue an access token for voting and commenting."""
    existing = await db.execute(select(User.id).where(User.email == body.email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(status_code=409, detail="User with this email already exists")

    user = User(**body.model_dump())
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise HTTPException(status_code=409, detail="User with this email already exists") from exc

    return UserCreatedResponse(
        **UserResponse.model_validate(user).model_dump(),
        access_token=create_access_token(user_id=user.id),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user
