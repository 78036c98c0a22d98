"""
File database model.

A File row is the metadata of an object held by the blob store. The bytes
themselves are never stored here, only the locator they are served from.
"""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filebox.database import Base
from filebox.utils.datetime import utc_now
from filebox.utils.ids import generate_short_id

if TYPE_CHECKING:
    from filebox.models.folder import Folder
    from filebox.models.user import User


class File(Base):
    """
    File model for stored object metadata.

    Attributes:
        id: Short base62 identifier
        name: Stored (generated) file name
        original_name: Filename supplied by the uploader
        size: File size in bytes
        mime_type: MIME type declared at upload
        url: Remote locator the file is served from
        public_id: Blob store identifier used for deletion
        user_id: Owner of the file
        folder_id: Containing folder (same owner), None for root level
        created_at: Upload timestamp (naive UTC)
    """

    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=generate_short_id)
    name: Mapped[str] = mapped_column(String(255))
    original_name: Mapped[str] = mapped_column(String(255))
    size: Mapped[int] = mapped_column(BigInteger)
    mime_type: Mapped[str] = mapped_column(String(255))
    url: Mapped[str] = mapped_column(String(1024))
    public_id: Mapped[str | None] = mapped_column(String(500), nullable=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    folder_id: Mapped[str | None] = mapped_column(
        ForeignKey("folders.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="files")
    folder: Mapped["Folder | None"] = relationship("Folder", back_populates="files")

    def __repr__(self) -> str:
        return f"<File(id={self.id}, name={self.name}, original_name={self.original_name})>"
