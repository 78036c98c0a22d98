from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filebox.database import Base
from filebox.utils.datetime import utc_now

if TYPE_CHECKING:
    from filebox.models.file import File
    from filebox.models.folder import Folder


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, server_default=func.now())

    folders: Mapped[list["Folder"]] = relationship("Folder", back_populates="user")
    files: Mapped[list["File"]] = relationship("File", back_populates="user")
