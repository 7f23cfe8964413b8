from pydantic import BaseModel, EmailStr


class RepairSummary(BaseModel):
    pending: int
    assigned: int
    completed: int
    verified: int


class StaffWorkload(BaseModel):
    name: str
    assigned: int
    completed: int


class RoomRequestCount(BaseModel):
    name: str
    count: int


class TestMailRequest(BaseModel):
    to: EmailStr
