import dataclasses
from enum import Enum
from typing import Optional

from .models import Session


class SessionChangeKind(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    TOKEN_REFRESHED = "token_refreshed"


@dataclasses.dataclass(frozen=True)
class SessionChanged:
    """
    Pushed by the identity backend whenever its session changes.
    `session` is None after sign-out.
    """
    kind: SessionChangeKind
    session: Optional[Session]
