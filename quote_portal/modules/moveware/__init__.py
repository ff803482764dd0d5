from .client import MovewareClient, JobActivity, create_moveware_client
from .credentials import get_credentials
from .models import Credentials

__all__ = [
    "MovewareClient",
    "JobActivity",
    "create_moveware_client",
    "get_credentials",
    "Credentials",
]
