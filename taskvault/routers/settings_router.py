from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.context import UserContext, get_user_context
from taskvault.database import get_db
from taskvault.schemas.settings import SettingsDocument
from taskvault.services.settings_service import SettingsService

router = APIRouter()
service = SettingsService()

@router.get("/", response_model=SettingsDocument)
async def get_settings(db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return SettingsDocument(settings_data=await service.get_settings(db, ctx))

@router.put("/", response_model=SettingsDocument)
async def save_settings(doc: SettingsDocument, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return SettingsDocument(settings_data=await service.save_settings(db, ctx, doc.settings_data))
