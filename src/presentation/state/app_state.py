from enum import Enum, auto

class SessionState(Enum):
    """
    Authentication state exposed by the SessionController.
    """
    UNINITIALIZED = auto()   # Controller created, initial load not started
    LOADING = auto()         # Initial load or refresh in flight
    AUTHENTICATED = auto()   # Session present
    UNAUTHENTICATED = auto() # No session, no error
    ERRORED = auto()         # No session, last operation failed


class SubmissionState(Enum):
    """
    Lifecycle of one workflow file in the SubmissionController.
    """
    IDLE = auto()          # Nothing selected
    SELECTED = auto()      # File chosen, validation running
    REJECTED = auto()      # Validation failed
    ACCEPTED = auto()      # Valid candidate, ready to submit
    SUBMITTING = auto()    # Upload in flight
    SUCCEEDED = auto()     # Upload done, auto-reset pending
    FAILED = auto()        # Upload failed, retry possible


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"
