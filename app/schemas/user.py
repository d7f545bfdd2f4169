from pydantic import ConfigDict
from typing import Optional

from app.core.constants import RoleEnum
from app.schemas.base import CamelModel

class User(CamelModel):
    """Main user schema for reading user data."""
    id: int
    name: str
    email: str
    role: RoleEnum
    target_band: Optional[float] = None
    current_level: Optional[str] = None

class UserContext(CamelModel):
    """The authenticated principal a request acts as."""
    user: User
    role: RoleEnum

    model_config = ConfigDict(use_enum_values=True)
