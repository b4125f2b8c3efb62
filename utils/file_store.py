"""
Keeps the files table and the upload directory consistent.

The two stores share no transaction, so every operation is ordered to never
leave a row pointing at a missing file:

- create:  place bytes -> insert row            (placed file removed if the insert fails)
- replace: read old row -> place bytes -> update row -> remove old file
- delete:  read path -> delete row -> remove file (only if a row went away)

A stale file on disk is tolerated; a dangling row is not.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List

from sqlalchemy import update, delete as sa_delete, func
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import FileStorage

from models.file import File
from utils.errors import NotFound
from utils.uploads import UploadDirectory

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
# ids outside a signed 64-bit integer can never match a row
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


def storable_id(file_id) -> bool:
    return isinstance(file_id, float) or MIN_ID <= file_id <= MAX_ID


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int


@dataclass(frozen=True)
class Download:
    root_dir: str
    file_name: str
    display_name: str


class FileStore:
    def __init__(self, storage, uploads: UploadDirectory):
        self.storage = storage
        self.uploads = uploads

    def read(self, file_id) -> File:
        record = self.storage.get(File, file_id) if storable_id(file_id) else None
        if record is None:
            raise NotFound(f"file by id {file_id} not found")
        return record

    def list(self, page_size: int = DEFAULT_PAGE_SIZE, page_number: int = 1) -> List[File]:
        offset = max(page_size * (page_number - 1), 0)
        session = self.storage.get_session()
        return (
            session.query(File)
            .populate_existing()
            .order_by(File.id.asc())
            .offset(offset)
            .limit(page_size)
            .all()
        )

    def create(self, upload: FileStorage) -> File:
        placed = self.uploads.place(upload)
        record = File(**placed.db_data())
        try:
            self.storage.new(record)
            self.storage.save()
        except SQLAlchemyError:
            # nothing references the placed file, don't leave it behind
            self._discard(placed.path)
            raise
        logger.info("stored file %s as id %s", placed.name, record.id)
        return self.read(record.id)

    def replace(self, file_id, upload: FileStorage) -> File:
        old = self.read(file_id)
        old_path = old.path

        placed = self.uploads.place(upload)
        stmt = (
            update(File)
            .where(File.id == old.id)
            .values(uploaded=func.now(), **placed.db_data())
        )
        try:
            changed = self.storage.execute(stmt)
        except SQLAlchemyError:
            self._discard(placed.path)
            raise

        if changed == 0:
            # the row disappeared between the read and the update
            self._discard(placed.path)
            raise NotFound(f"file by id {file_id} not found")

        if old_path != placed.path:
            self._discard(old_path)
        return self.read(old.id)

    def delete(self, file_id) -> DeleteResult:
        if not storable_id(file_id):
            return DeleteResult(deleted_count=0)
        session = self.storage.get_session()
        path = session.query(File.path).filter(File.id == file_id).scalar()

        deleted = self.storage.execute(sa_delete(File).where(File.id == file_id))
        if deleted > 0 and path:
            self._discard(path)
        return DeleteResult(deleted_count=deleted)

    def prepare_download(self, file_id) -> Download:
        record = self.read(file_id)
        full_path = self.uploads.resolve(record.path)
        file_name = os.path.basename(full_path)
        if file_name.startswith("."):
            raise NotFound(f"file by id {file_id} not found")
        return Download(
            root_dir=os.path.dirname(full_path),
            file_name=file_name,
            display_name=record.name,
        )

    def _discard(self, relative: str) -> None:
        try:
            if self.uploads.remove(relative):
                logger.info("removed %s", relative)
        except (OSError, NotFound):
            logger.exception("could not remove %s", relative)
