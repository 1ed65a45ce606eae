"""
EntrySync Backend — Route Dependencies
========================================

What:  FastAPI dependencies shared by the route modules.
How:   get_gateway wraps the request's AsyncSession (from get_db_session) in a
       PersistenceGateway. Overriding get_db_session in tests swaps the
       database behind every route at once.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from entrysync.database import get_db_session
from entrysync.services.gateway import PersistenceGateway


async def get_gateway(db: AsyncSession = Depends(get_db_session)) -> PersistenceGateway:
    return PersistenceGateway(db)
