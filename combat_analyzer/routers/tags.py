from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.tag import TagCreate, TagResponse
from ..services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


def get_tag_service(db: Session = Depends(get_db)) -> TagService:
    return TagService(db)


@router.get("", response_model=list[TagResponse])
def list_global_tags(
    search: str | None = Query(None, description="Substring to look for in tag names"),
    tag_service: TagService = Depends(get_tag_service),
):
    return tag_service.list_global_tags(search)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_global_tag(payload: TagCreate, tag_service: TagService = Depends(get_tag_service)):
    return tag_service.create_global_tag(payload)
