from filehost.models.user import User
from filehost.models.application import Application
from filehost.models.file import File

__all__ = ["User", "Application", "File"]
