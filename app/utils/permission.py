import logging

from app.core.exceptions import ForbiddenError
from app.schemas.user import UserContext

logger = logging.getLogger(__name__)


class PermissionHelper:
    @staticmethod
    def is_owner(context: UserContext, owner_id: int) -> bool:
        return context.user.id == owner_id

    @staticmethod
    def require_owner(context: UserContext, owner_id: int, resource: str = "resource"):
        # Always compared against the stored owner, never the request payload
        if not PermissionHelper.is_owner(context, owner_id):
            logger.warning(f"User {context.user.id} denied access to {resource} owned by {owner_id}")
            raise ForbiddenError("Access denied")
