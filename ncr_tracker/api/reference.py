from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ncr_tracker.core.deps import get_current_user
from ncr_tracker.db.session import get_db
from ncr_tracker.schemas.catalog import DescriptionTypeOut, FormatOut
from ncr_tracker.services import reference

router = APIRouter()


@router.get("/description-types", response_model=List[DescriptionTypeOut])
def description_types(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return reference.list_description_types(db)


@router.get("/formats", response_model=List[FormatOut])
def formats(db: Session = Depends(get_db), user=Depends(get_current_user)):
    return reference.list_formats(db)
