"""Upload Storage — writes uploaded page images to the upload directory.

Invariants:
    - Stored files get a random local name; the client filename is only recorded
    - Uploads are copied to disk in CHUNK_SIZE pieces, never read whole into memory
    - An upload over max_bytes raises UploadTooLargeError and leaves no file behind
    - discard_upload() is safe to call for a file that is already gone
"""

import logging
import mimetypes
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from comic_site.core.errors import UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    localname: str
    mimetype: str
    size: int


async def _copy_chunks(
    upload: UploadFile, out: BinaryIO, filename: str, max_bytes: int | None,
) -> int:
    size = 0
    while chunk := await upload.read(CHUNK_SIZE):
        size += len(chunk)
        if max_bytes is not None and size > max_bytes:
            raise UploadTooLargeError(filename, max_bytes)
        await run_in_threadpool(out.write, chunk)
    return size


async def save_upload(
    upload: UploadFile, directory: str, max_bytes: int | None = None,
) -> StoredUpload:
    """Persist an uploaded file under directory with a generated name."""
    filename = Path(upload.filename or "upload").name
    suffix = Path(filename).suffix.lower()
    localname = f"{uuid.uuid4().hex}{suffix}"
    mimetype = (
        upload.content_type
        or mimetypes.guess_type(filename)[0]
        or "application/octet-stream"
    )
    target = Path(directory)
    await run_in_threadpool(target.mkdir, parents=True, exist_ok=True)
    path = target / localname

    out = await run_in_threadpool(path.open, "wb")
    try:
        size = await _copy_chunks(upload, out, filename, max_bytes)
    except Exception:
        await run_in_threadpool(out.close)
        await run_in_threadpool(path.unlink, missing_ok=True)
        raise
    await run_in_threadpool(out.close)

    logger.info(f"Stored upload {filename} as {localname} ({size} bytes)")
    return StoredUpload(filename, localname, mimetype, size)


async def discard_upload(stored: StoredUpload, directory: str) -> None:
    """Remove a stored upload whose page creation did not commit."""
    path = Path(directory) / stored.localname
    await run_in_threadpool(path.unlink, missing_ok=True)
    logger.info(f"Discarded upload {stored.localname}")
