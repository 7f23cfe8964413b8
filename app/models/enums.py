from enum import Enum


class AccountRole(str, Enum):
    Admin = "admin"
    Staff = "staff"
    User = "user"


class RepairStatus(str, Enum):
    Pending = "Pending"
    Assigned = "Assigned"
    Completed = "Completed"
    Verified = "Verified"


class BookingStatus(str, Enum):
    Pending = "Pending"
    Booked = "Booked"
    Completed = "Completed"
    Cancelled = "Cancelled"


class GatePassType(str, Enum):
    Permanent = "permanent"
    Temporary = "temporary"
