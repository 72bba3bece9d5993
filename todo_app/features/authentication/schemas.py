from pydantic import BaseModel

# ---------- Inputs (formulaires HTML) ----------

class RegisterIn(BaseModel):
    email: str
    password: str
    username: str

class LoginIn(BaseModel):
    email: str
    password: str
