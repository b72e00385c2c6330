"""SQLAlchemy ORM model for the users table.

Accounts are created and managed by the identity service; this backend only
reads display names from it.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, name='{self.name}')>"
