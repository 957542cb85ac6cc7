from fastapi import Depends, Header, HTTPException, status
from ..services.social_service import SocialService
from ..store import PlanStore, get_store
import logging

logger = logging.getLogger(__name__)


async def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id"),
    store: PlanStore = Depends(get_store),
) -> str:
    """Identify the acting user from the X-User-Id header"""
    if SocialService(store).get_user(x_user_id) is None:
        logger.warning(f"Request from unknown user {x_user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return x_user_id
