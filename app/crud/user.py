from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import User as UserSchema

class CRUDUser(CRUDBase[User, UserSchema, UserSchema]):
    pass


user = CRUDUser(User)
