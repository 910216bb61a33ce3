class GuestbookError(Exception):
    """Base exception for the guestbook application."""
    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)

# --- Invalid Input (400) ---
class InvalidInputError(GuestbookError):
    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)

class MissingFieldError(InvalidInputError):
    def __init__(self, field: str, message: str = None):
        if message is None:
            message = f"{field} is required"
        self.field = field
        super().__init__(message)

class ParentNotFoundError(InvalidInputError):
    def __init__(self, message: str = "Parent entry not found"):
        super().__init__(message)

# --- Not Found Errors (404) ---
class EntityNotFoundError(GuestbookError):
    """Base for Not Found errors."""
    pass

class EntryNotFoundError(EntityNotFoundError):
    # Also raised when the caller does not own the entry; the two cases are not told apart.
    def __init__(self, message: str = "Entry not found or unauthorized"):
        super().__init__(message)

class UserNotFoundError(EntityNotFoundError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)

class DomainNotConnectedError(EntityNotFoundError):
    def __init__(self, message: str = "Domain not connected"):
        super().__init__(message)

# --- Already Exists Errors (409) ---
class EntityAlreadyExistsError(GuestbookError):
    pass

class UserAlreadyExistsError(EntityAlreadyExistsError):
    def __init__(self, message: str = "Username already taken"):
        super().__init__(message)

class DomainAlreadyClaimedError(EntityAlreadyExistsError):
    def __init__(self, message: str = "This domain is already connected to another user."):
        super().__init__(message)

# --- Authentication Errors (401) ---
class AuthError(GuestbookError):
    pass

class UnauthorizedError(AuthError):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)

class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)

# --- Remote provider errors (400) ---
class DomainProviderError(GuestbookError):
    def __init__(self, message: str = "Failed to add domain to hosting provider"):
        super().__init__(message)

# --- System Errors (500) ---
class StoreFailureError(GuestbookError):
    def __init__(self, original_error: str):
        super().__init__(f"Entry store error: {original_error}")
