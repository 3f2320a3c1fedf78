from sqlalchemy import Column, String, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from ..core.database import Base, generate_uuid

class UserRoleAssignment(Base):
    """Application role granted to an auth-platform user."""
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<UserRoleAssignment(user_id={self.user_id}, role='{self.role}')>"
