from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from taskcal.database import get_db as db_session
from taskcal.errors import Unauthenticated
from taskcal.models.user import User as UserModel
from taskcal.schemas.user import TokenData
from taskcal.services import policy
from taskcal.utils.security import verify_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

def get_db(db: AsyncSession = Depends(db_session)):
    return db

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str | None = Depends(oauth2_scheme)
) -> TokenData:
    """Identity from the bearer token, refused once the account no longer exists."""
    if not token:
        raise Unauthenticated()
    token_data = verify_access_token(token)

    result = await db.execute(select(UserModel.id).filter(UserModel.id == token_data.id))
    if result.scalar() is None:
        raise Unauthenticated("User no longer exists")
    return token_data

async def require_admin(current_user: TokenData = Depends(get_current_user)) -> TokenData:
    policy.ensure_can_manage_users(current_user)
    return current_user
