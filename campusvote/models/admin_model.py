from pydantic import BaseModel


class Admin(BaseModel):
    id: str
    username: str
    password_hash: str
