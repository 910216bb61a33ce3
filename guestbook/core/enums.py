from enum import Enum

class EntryStatus(str, Enum):
    PENDING = "pending"    # waiting for owner approval
    APPROVED = "approved"  # visible (terminal)
