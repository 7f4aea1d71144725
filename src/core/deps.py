from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.runtime import Runtime, get_runtime
from db.database import get_db

DbSession = Annotated[AsyncSession, Depends(get_db)]
RuntimeDep = Annotated[Runtime, Depends(get_runtime)]
