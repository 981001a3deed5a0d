"""Helpers for multipart upload endpoints."""

from fastapi import UploadFile

from expensify.services.document_manager import IncomingFile


async def read_upload(file: UploadFile | None) -> IncomingFile | None:
    """Read a multipart file into memory. Missing files map to None."""
    if file is None:
        return None
    content = await file.read()
    return IncomingFile(
        filename=file.filename or "",
        content_type=file.content_type or "application/octet-stream",
        content=content,
    )
