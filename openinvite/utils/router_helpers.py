from fastapi import HTTPException, status
from typing import Callable, Any
from functools import wraps
import logging

from ..services.plan_service import (
    PlanServiceError,
    PlanNotFoundError,
    PermissionDeniedError,
)
from ..services.social_service import (
    SocialServiceError,
    UserNotFoundError,
    GroupNotFoundError,
    RequestNotFoundError,
)
from ..services.notification_service import (
    NotificationServiceError,
    NotificationNotFoundError,
)
from .constants import ResponseMessages

logger = logging.getLogger(__name__)


def handle_service_errors(func: Callable) -> Callable:
    """Decorator to standardize service error handling in routers"""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        # Permission/Access Errors -> 403 Forbidden
        except PermissionDeniedError as e:
            logger.warning(f"Permission denied: {str(e)}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

        except (
            PlanNotFoundError,
            UserNotFoundError,
            GroupNotFoundError,
            RequestNotFoundError,
            NotificationNotFoundError,
        ) as e:
            logger.warning(f"Resource not found: {str(e)}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

        # Validation and business rule errors -> 400 Bad Request
        except (
            PlanServiceError,
            SocialServiceError,
            NotificationServiceError,
        ) as e:
            logger.warning(f"Service error: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        except ValueError as e:
            logger.warning(f"Validation error: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # Unexpected errors -> 500 Internal Server Error
        except Exception as e:
            logger.error(
                f"Unexpected error in {func.__name__}: {str(e)}", exc_info=True
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An unexpected error occurred",
            )

    return wrapper


class RouterResponse:
    """Envelopes shared by every router: {success, message[, data]}"""

    @staticmethod
    def _envelope(message: str, data: Any = None) -> dict:
        response = {"success": True, "message": message}
        if data is not None:
            response["data"] = data
        return response

    @staticmethod
    def success(data: Any = None, message: str = ResponseMessages.SUCCESS) -> dict:
        return RouterResponse._envelope(message, data)

    @staticmethod
    def created(data: Any, message: str = ResponseMessages.CREATED) -> dict:
        return RouterResponse._envelope(message, data)

    @staticmethod
    def updated(data: Any = None, message: str = ResponseMessages.UPDATED) -> dict:
        return RouterResponse._envelope(message, data)

    @staticmethod
    def deleted(message: str = ResponseMessages.DELETED) -> dict:
        return RouterResponse._envelope(message)
