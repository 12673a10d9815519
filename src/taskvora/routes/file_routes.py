"""
taskvora/routes/file_routes.py: Metadados dos arquivos enviados.

  GET    /api/files       → lista (mais recentes primeiro)
  DELETE /api/files/{id}  → remove o registro
"""
from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.controllers.file_controller import FileController, UploadedFileRead
from taskvora.database import get_db
from taskvora.exceptions import NotFoundError
from taskvora.middlewares.auth import current_user_id

router = APIRouter(prefix="/api/files", tags=["Files"])


@router.get("", summary="Listar arquivos")
async def list_files(
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    files = await FileController.list_files(db, user_id)
    return {"success": True, "files": [UploadedFileRead.model_validate(f) for f in files]}


@router.delete("/{file_id}", summary="Remover arquivo")
async def delete_file(
    file_id: int,
    user_id: int = Depends(current_user_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        f = await FileController.delete(db, user_id, file_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    logger.info(f"🗑️  Arquivo #{f.id} removido (blob: {f.filepath})")
    return {"success": True, "message": "File deleted successfully"}
