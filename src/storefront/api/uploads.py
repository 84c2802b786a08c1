"""Validation of uploaded payment-slip images."""

from fastapi import HTTPException, UploadFile

from storefront.ordering.slip import MAX_SLIP_BYTES


async def read_image_upload(upload: UploadFile | None, max_bytes: int = MAX_SLIP_BYTES) -> bytes:
    """Return the file contents, or raise 400 for a missing, non-image or oversized file."""
    if upload is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"File too large (max {max_bytes // (1024 * 1024)}MB)")
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return data
