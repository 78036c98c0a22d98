from filebox.models.file import File
from filebox.models.folder import Folder
from filebox.models.user import User

__all__ = ["File", "Folder", "User"]
