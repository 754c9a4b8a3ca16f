from pydantic import BaseModel


class LoginRequest(BaseModel):
    emp_id: str
    password: str


class RegisterRequest(BaseModel):
    emp_id: str
    password: str
    confirm_password: str
