from fastapi import APIRouter, status
from sqlalchemy import select

from app.api.deps import DbSession, CurrentUser
from app.exceptions import ConflictError
from app.models.category import Category
from app.schemas.product import CategoryCreate, CategoryResponse

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: DbSession, current_user: CurrentUser):
    result = await db.execute(select(Category).order_by(Category.name))
    return result.scalars().all()


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(data: CategoryCreate, db: DbSession, current_user: CurrentUser):
    existing = await db.execute(select(Category.id).where(Category.slug == data.slug))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(f"Category slug '{data.slug}' already exists")

    category = Category(**data.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category
