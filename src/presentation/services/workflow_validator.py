import dataclasses
import json
import re

from enum import Enum, auto
from typing import NoReturn, Optional

from src.presentation.resources.strings import UIStrings

DEFAULT_MAX_SIZE_BYTES = 1024 * 1024

_FILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+\.json$")


class ValidationKind(Enum):
    VALID = auto()
    INVALID_NAME = auto()
    INVALID_SIZE = auto()
    INVALID_CONTENT = auto()


@dataclasses.dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of validating a workflow file. `reason` is set for every invalid kind.
    """
    kind: ValidationKind
    reason: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.kind is ValidationKind.VALID

    @classmethod
    def valid(cls) -> "ValidationOutcome":
        return cls(ValidationKind.VALID)

    @classmethod
    def invalid_name(cls, reason: str) -> "ValidationOutcome":
        return cls(ValidationKind.INVALID_NAME, reason)

    @classmethod
    def invalid_size(cls, reason: str) -> "ValidationOutcome":
        return cls(ValidationKind.INVALID_SIZE, reason)

    @classmethod
    def invalid_content(cls, reason: str) -> "ValidationOutcome":
        return cls(ValidationKind.INVALID_CONTENT, reason)


def _reject_constant(name: str) -> NoReturn:
    # NaN / Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


class WorkflowValidator:
    """
    Client-side checks for a workflow JSON file.

    Checks run in a fixed order and stop at the first failure:
    extension, path separators, name pattern, size, JSON syntax.
    Every method is pure.
    """
    def __init__(self, max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES):
        self._max_size_bytes = max_size_bytes

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    def validate_name(self, file_name: str) -> ValidationOutcome:
        if not file_name.endswith(".json"):
            return ValidationOutcome.invalid_name(UIStrings.ERR_EXTENSION)

        if "/" in file_name or "\\" in file_name:
            return ValidationOutcome.invalid_name(UIStrings.ERR_PATH_SEPARATOR)

        if not _FILE_NAME_PATTERN.fullmatch(file_name):
            return ValidationOutcome.invalid_name(UIStrings.ERR_NAME_PATTERN)

        return ValidationOutcome.valid()

    def validate_size(self, size_bytes: int) -> ValidationOutcome:
        if size_bytes > self._max_size_bytes:
            return ValidationOutcome.invalid_size(UIStrings.ERR_FILE_TOO_LARGE.format(self._max_size_bytes))
        return ValidationOutcome.valid()

    def validate_content(self, raw_bytes: bytes) -> ValidationOutcome:
        try:
            # utf-8-sig drops a leading BOM the way text readers do
            text = raw_bytes.decode("utf-8-sig")
            json.loads(text, parse_constant=_reject_constant)
        except ValueError:
            # Covers JSONDecodeError and UnicodeDecodeError
            return ValidationOutcome.invalid_content(UIStrings.ERR_INVALID_JSON)
        except RecursionError:
            return ValidationOutcome.invalid_content(UIStrings.ERR_INVALID_JSON)
        return ValidationOutcome.valid()

    def validate(self, file_name: str, raw_bytes: bytes) -> ValidationOutcome:
        """
        Runs the whole pipeline on an in-memory file.
        """
        outcome = self.validate_name(file_name)
        if not outcome.is_valid:
            return outcome

        outcome = self.validate_size(len(raw_bytes))
        if not outcome.is_valid:
            return outcome

        return self.validate_content(raw_bytes)
