"""
API routes for points of sale.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pos_reviews.database import get_db, Pos
from pos_reviews.models import CreatePosRequest, PosResponse
from pos_reviews.stores import SqlPosStore


router = APIRouter(prefix="/pos", tags=["POS"])


@router.post("/", response_model=PosResponse, status_code=201)
def create_pos(
    request: CreatePosRequest,
    db: Session = Depends(get_db)
) -> PosResponse:
    """Register a point of sale."""
    pos = SqlPosStore(db).add(Pos(name=request.name, description=request.description))
    return PosResponse.model_validate(pos)


@router.get("/", response_model=List[PosResponse])
def get_all_pos(db: Session = Depends(get_db)) -> List[PosResponse]:
    """Get all points of sale."""
    return [PosResponse.model_validate(p) for p in SqlPosStore(db).find_all()]


@router.get("/{pos_id}", response_model=PosResponse)
def get_pos(pos_id: int, db: Session = Depends(get_db)) -> PosResponse:
    """Get a single point of sale."""
    return PosResponse.model_validate(SqlPosStore(db).get_by_id(pos_id))
