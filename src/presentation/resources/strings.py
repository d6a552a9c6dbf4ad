"""
Centralized storage for all user-facing strings in the Presentation Layer.
Prevents "magic strings" in code and simplifies localization.
"""

class UIStrings:
    # Validation Messages
    ERR_EXTENSION = "File must have .json extension"
    ERR_PATH_SEPARATOR = "File name cannot contain path separators"
    ERR_NAME_PATTERN = "File name must contain only letters, numbers, hyphens, and underscores"
    ERR_FILE_TOO_LARGE = "File size exceeds maximum of {} bytes"
    ERR_INVALID_JSON = "Invalid JSON: File must contain valid JSON syntax"
    ERR_READ_FAILED = "Failed to read file"

    # Session Messages
    ERR_REFRESH_FAILED = "Failed to refresh session"
    ERR_LOGOUT_FAILED = "Failed to log out"
    ERR_LOAD_SESSION_FAILED = "Failed to load session"

    # Upload Messages
    PROGRESS_UPLOADING = "Uploading file..."
    PROGRESS_SUCCESS = "Upload successful!"
    ERR_UPLOAD_FAILED = "Upload failed"

    # Notification Titles
    TITLE_UPLOAD_SUCCESS = "Upload Successful"
    TITLE_UPLOAD_FAILED = "Upload Failed"
    TITLE_INSTALL_SUCCESS = "Installation Successful"
    TITLE_INSTALL_FAILED = "Installation Failed"
    TITLE_INSTALL_ERROR = "Installation Error"

    # Notification Messages
    MSG_UPLOAD_SUCCESS = "Workflow uploaded and registration triggered successfully"
    MSG_UPLOAD_FAILED = "Failed to upload workflow file"
    MSG_INSTALL_PROCESSING = "Processing installation..."
    MSG_INSTALL_WELCOME = "Welcome, {}! Your fork has been created at {}"
    MSG_INSTALL_INCOMPLETE = "Installation could not be completed."
    MSG_INSTALL_MISSING_ID = "Missing installation ID. Please try installing again."
    MSG_INSTALL_UNEXPECTED = "An unexpected error occurred during installation."

    # Routes
    ROUTE_UPLOAD = "/upload"
