"""
File metadata. The bytes live on disk at FILE_STORAGE_ROOT/<path>;
while a row exists the file at its path must exist too (see utils.file_store).
"""
from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func

from models.base_model import Base, BaseModel


class File(BaseModel, Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    extension = Column(String(32), nullable=False, default="")
    mimetype = Column(String(255), nullable=True)
    size = Column(Integer, nullable=False, default=0)
    uploaded = Column(DateTime, server_default=func.now(), nullable=False)
    # relative to the storage root, e.g. "upload/3f2a..."
    path = Column(String(512), nullable=False)

    __table_args__ = (Index("ix_files_path", "path"),)

    def __repr__(self):
        return f"<File id={self.id} name={self.name!r}>"
