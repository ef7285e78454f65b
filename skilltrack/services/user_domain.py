from typing import Optional

from ..errors import ConflictError
from ..models import User


class UserDomainService:
    def ensure_email_available(self, existing: Optional[User], email: str) -> None:
        if existing is not None:
            raise ConflictError(f"Email {email} is already in use.")
