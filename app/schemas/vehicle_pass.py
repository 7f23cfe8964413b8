# app/schemas/vehicle_pass.py
from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class VehiclePassCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    pass_no: NonEmptyStr
    date: datetime
    staff_code: NonEmptyStr
    issued_to: NonEmptyStr
    class_or_dept: NonEmptyStr
    rc_owner: NonEmptyStr
    vehicle_reg: NonEmptyStr
    vehicle_type: NonEmptyStr
    authorization: NonEmptyStr

    # optional fields may be blank
    rc_no: str = ""
    license_no: str = ""
    remarks: str = ""


class VehiclePassUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    pass_no: Optional[NonEmptyStr] = None
    date: Optional[datetime] = None
    staff_code: Optional[NonEmptyStr] = None
    issued_to: Optional[NonEmptyStr] = None
    class_or_dept: Optional[NonEmptyStr] = None
    rc_owner: Optional[NonEmptyStr] = None
    rc_no: Optional[str] = None
    vehicle_reg: Optional[NonEmptyStr] = None
    vehicle_type: Optional[NonEmptyStr] = None
    license_no: Optional[str] = None
    authorization: Optional[NonEmptyStr] = None
    remarks: Optional[str] = None


class VehiclePassRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pass_no: str
    date: datetime
    staff_code: str
    issued_to: str
    class_or_dept: str
    rc_owner: str
    rc_no: str
    vehicle_reg: str
    vehicle_type: str
    license_no: str
    authorization: str
    remarks: str
    created_at: datetime
    updated_at: datetime
