"""
Role Model
"""
import enum

from sqlalchemy import Column, Integer, String
from backend.database import Base


class RoleName(str, enum.Enum):
    ADMINISTRATOR = "administrator"
    DEVELOPER = "developer"
    VIEWER = "viewer"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False, index=True)

    def __repr__(self):
        return f"<Role {self.name}>"
