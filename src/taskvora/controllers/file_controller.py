"""
taskvora/controllers/file_controller.py: Metadados dos arquivos enviados.

Os bytes ficam num blob store externo (chave = dono + id), que grava a
linha em uploaded_files no upload. Aqui só listagem e remoção do metadado.
"""
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskvora.exceptions import NotFoundError
from taskvora.models.uploaded_file import UploadedFile


class UploadedFileRead(BaseModel):
    id: int
    filename: str
    uploaded_at: datetime

    class Config:
        from_attributes = True


class FileController:

    @staticmethod
    async def list_files(db: AsyncSession, user_id: int) -> list[UploadedFile]:
        result = await db.execute(
            select(UploadedFile)
            .where(UploadedFile.user_id == user_id)
            .order_by(UploadedFile.uploaded_at.desc(), UploadedFile.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def get(db: AsyncSession, user_id: int, file_id: int) -> UploadedFile:
        f = await db.scalar(
            select(UploadedFile).where(UploadedFile.id == file_id, UploadedFile.user_id == user_id)
        )
        if not f:
            raise NotFoundError("File not found")
        return f

    @staticmethod
    async def delete(db: AsyncSession, user_id: int, file_id: int) -> UploadedFile:
        """Remove o metadado e devolve o registro, o blob é responsabilidade de quem chamou."""
        f = await FileController.get(db, user_id, file_id)
        await db.delete(f)
        await db.commit()
        return f
