"""
Filesystem side of file resources.

UploadDirectory writes incoming uploads under <root>/<subdir>/ with random,
unguessable names and hands back the metadata the files table needs.
Paths stored in the database are relative to `root`.
"""
from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass

from werkzeug.datastructures import FileStorage
from werkzeug.security import safe_join

from utils.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)


@dataclass
class PlacedFile:
    name: str
    extension: str
    mimetype: str | None
    size: int
    path: str

    def db_data(self) -> dict:
        return {
            "name": self.name,
            "extension": self.extension,
            "mimetype": self.mimetype,
            "size": self.size,
            "path": self.path,
        }


def split_extension(filename: str) -> str:
    parts = filename.split(".")
    return parts[-1] if len(parts) > 1 else ""


class UploadDirectory:
    def __init__(self, root: str, subdir: str = "upload"):
        self.root = os.path.abspath(root)
        self.subdir = subdir
        os.makedirs(os.path.join(self.root, self.subdir), exist_ok=True)

    def place(self, upload: FileStorage | None) -> PlacedFile:
        """Write the upload to a fresh path and describe it."""
        if upload is None or not upload.filename:
            raise ValidationFailed("file is required")
        relative = f"{self.subdir}/{uuid.uuid4().hex}"
        target = self.resolve(relative)
        upload.save(target)
        placed = PlacedFile(
            name=upload.filename,
            extension=split_extension(upload.filename),
            mimetype=upload.mimetype or None,
            size=os.path.getsize(target),
            path=relative,
        )
        logger.debug("placed %s (%d bytes) at %s", placed.name, placed.size, relative)
        return placed

    def resolve(self, relative: str) -> str:
        """Absolute path of `relative`; refuses anything outside the root."""
        full = safe_join(self.root, relative.replace("\\", "/"))
        if full is None:
            raise NotFound("file path outside of storage root")
        return full

    def exists(self, relative: str) -> bool:
        try:
            return os.path.isfile(self.resolve(relative))
        except NotFound:
            return False

    def remove(self, relative: str) -> bool:
        """Remove the file if present. Returns whether something was removed."""
        if not self.exists(relative):
            return False
        os.remove(self.resolve(relative))
        return True

    def exists_dir(self) -> bool:
        return os.path.isdir(os.path.join(self.root, self.subdir))

    def read(self, relative: str) -> bytes:
        with open(self.resolve(relative), "rb") as fh:
            return fh.read()
