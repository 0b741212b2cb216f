from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Dict, Any
from ..database import get_db
from ..dependencies import get_current_user
from ..models.user import User
from ..schemas.child import ChildCreate, ChildResponse
from ..services.party_service import PartyService
from ..utils.router_helpers import handle_service_errors, RouterResponse

router = APIRouter(tags=["children"])


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
@handle_service_errors
async def create_child(
    child_data: ChildCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    child = PartyService(db).create_child(child_data, user_id=current_user.id)
    return RouterResponse.created(
        data={"child": ChildResponse.model_validate(child).model_dump(mode="json")}
    )


@router.get("/", response_model=Dict[str, Any])
@handle_service_errors
async def list_children(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    children = PartyService(db).list_children(current_user.id)
    return RouterResponse.success(
        data={
            "children": [
                ChildResponse.model_validate(c).model_dump(mode="json")
                for c in children
            ]
        }
    )
