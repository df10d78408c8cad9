# SQLAlchemy models
from .base import Base
from .records import FormRecord, ResponseRecord

__all__ = [
    "Base",
    "FormRecord",
    "ResponseRecord",
]
