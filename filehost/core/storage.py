import io
import logging
import os
import shutil
import uuid

from fastapi.concurrency import run_in_threadpool
from PIL import Image

from filehost.core.config import Settings

logger = logging.getLogger(__name__)

WEBP_QUALITY = 40
WEBP_METHOD = 6


def generate_unique_filename(original_name: str) -> str:
    """Append a random suffix to the base name, keeping the extension"""
    stem, ext = os.path.splitext(os.path.basename(original_name))
    return f"{stem}_{uuid.uuid4()}{ext}"


def webp_sibling_name(current_name: str) -> str:
    stem, _ = os.path.splitext(current_name)
    return f"{stem}.webp"


def _write_bytes(file_path: str, data: bytes) -> None:
    with open(file_path, "wb") as f:
        f.write(data)


def _read_bytes(file_path: str) -> bytes:
    with open(file_path, "rb") as f:
        return f.read()


def encode_webp(data: bytes) -> bytes:
    """Lossy WebP recompression; Pillow always chroma-subsamples lossy WebP to 4:2:0"""
    with Image.open(io.BytesIO(data)) as im:
        if im.mode not in ("RGB", "RGBA"):
            has_alpha = im.mode in ("LA", "PA") or "transparency" in im.info
            im = im.convert("RGBA" if has_alpha else "RGB")
        buf = io.BytesIO()
        im.save(buf, format="WEBP", quality=WEBP_QUALITY, method=WEBP_METHOD, lossless=False)
    return buf.getvalue()


class FileStorage:
    """Per-tenant folders under a single upload root.

    Bulk reads, writes, WebP encoding and folder removal run in the threadpool.
    """

    def __init__(self, settings: Settings):
        self.root = settings.UPLOAD_DIR

    def ensure_root(self) -> None:
        os.makedirs(self.root, exist_ok=True)

    def tenant_folder(self, application_name: str) -> str:
        return os.path.join(self.root, application_name)

    async def ensure_folder(self, folder_path: str) -> str:
        """Create the folder if missing; an existing folder is fine"""
        os.makedirs(folder_path, exist_ok=True)
        return folder_path

    async def remove_folder(self, folder_path: str) -> bool:
        """Best-effort recursive removal"""
        try:
            await run_in_threadpool(shutil.rmtree, folder_path)
            return True
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning(f"Error removing folder {folder_path}: {e}")
            return False

    async def write_file(self, folder_path: str, filename: str, data: bytes) -> str:
        """Write bytes into the folder and return the full path"""
        await self.ensure_folder(folder_path)
        file_path = os.path.join(folder_path, filename)
        await run_in_threadpool(_write_bytes, file_path, data)
        return file_path

    async def read_file(self, file_path: str) -> bytes:
        return await run_in_threadpool(_read_bytes, file_path)

    async def file_exists(self, file_path: str) -> bool:
        return os.path.isfile(file_path)

    async def file_size(self, file_path: str) -> int:
        return os.path.getsize(file_path)

    async def rename_file(self, old_path: str, new_path: str) -> None:
        """Rename without ever replacing an existing destination"""
        if os.path.exists(new_path):
            raise FileExistsError(new_path)
        os.rename(old_path, new_path)

    async def delete_file(self, file_path: str) -> bool:
        """Delete a file, logging instead of raising on failure"""
        try:
            os.remove(file_path)
            return True
        except OSError as e:
            logger.warning(f"Error deleting file {file_path}: {e}")
            return False

    async def convert_to_webp(self, input_path: str, output_path: str) -> int:
        """Recompress an image into output_path and return the written size"""
        if os.path.exists(output_path):
            raise FileExistsError(output_path)

        data = await self.read_file(input_path)
        webp_data = await run_in_threadpool(encode_webp, data)
        await run_in_threadpool(_write_bytes, output_path, webp_data)
        return os.path.getsize(output_path)
