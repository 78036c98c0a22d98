"""
Folder database model.

Folders form a per-user tree through the nullable parent_id column
(null means root level).
"""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filebox.database import Base
from filebox.utils.datetime import utc_now
from filebox.utils.ids import generate_short_id

if TYPE_CHECKING:
    from filebox.models.file import File
    from filebox.models.user import User


class Folder(Base):
    """
    Folder model.

    Attributes:
        id: Short base62 identifier
        name: Display name
        description: Optional free-text description
        user_id: Owner of the folder
        parent_id: Parent folder (same owner), None for root-level folders
        created_at: Creation timestamp (naive UTC)
    """

    __tablename__ = "folders"

    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=generate_short_id)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("folders.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utc_now, server_default=func.now(), index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="folders")
    parent: Mapped["Folder | None"] = relationship(
        "Folder", remote_side="Folder.id", back_populates="children"
    )
    children: Mapped[list["Folder"]] = relationship("Folder", back_populates="parent")
    files: Mapped[list["File"]] = relationship("File", back_populates="folder")

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name}, user_id={self.user_id})>"
