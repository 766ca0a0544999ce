from src.models.alert import Alert
from src.models.base import Base
from src.models.scan_settings import ScanSettings
from src.models.token import Token

__all__ = [
    "Base",
    "Token",
    "Alert",
    "ScanSettings",
]
