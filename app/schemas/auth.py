from pydantic import BaseModel, Field, ConfigDict


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    success: bool = True
    username: str


class AdminIdentity(BaseModel):
    """토큰에서 복원한 관리자 정보"""
    model_config = ConfigDict(populate_by_name=True)

    admin_id: int = Field(alias="adminId")
    username: str


class MeResponse(BaseModel):
    authenticated: bool
    user: AdminIdentity
