"""Protocol interfaces for the database API client."""
from .transport import Transport

__all__ = ["Transport"]
