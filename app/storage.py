# app/storage.py
"""Image storage for listing uploads and preview URL building."""
import os
import uuid
import shutil
from urllib.parse import urlsplit, urlunsplit

from fastapi import UploadFile

from .schemas import StoredImage


class LocalImageStore:
    """Stores uploads as `<root>/upload/<folder>/<name>`, mirroring hosted asset URLs."""

    def __init__(self, root: str, base_url: str = "/media", folder: str = "listings"):
        self.root = root
        self.base_url = base_url.rstrip("/")
        self.folder = folder
        os.makedirs(os.path.join(root, "upload", folder), exist_ok=True)

    def save(self, upload: UploadFile) -> StoredImage:
        ext = os.path.splitext(upload.filename or "")[1].lower()
        filename = f"{self.folder}/{uuid.uuid4().hex}{ext}"
        path = os.path.join(self.root, "upload", *filename.split("/"))
        with open(path, "wb") as fh:
            shutil.copyfileobj(upload.file, fh)
        return StoredImage(filename=filename, url=f"{self.base_url}/upload/{filename}")

    def preview_url(self, url: str, width: int, height: int) -> str:
        """URL of a resized preview; files this store serves itself are not resized."""
        if url and url.startswith(f"{self.base_url}/"):
            return url
        return image_transform_url(url, width, height)


def image_transform_url(url: str, width: int, height: int) -> str:
    """Insert a `w_<width>,h_<height>` transformation after the `upload` segment."""
    if not url:
        return url
    parts = urlsplit(url)
    segments = parts.path.split("/")
    if "upload" not in segments:
        return url
    i = segments.index("upload")
    segments.insert(i + 1, f"w_{int(width)},h_{int(height)}")
    return urlunsplit(parts._replace(path="/".join(segments)))
