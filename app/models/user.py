from sqlalchemy import String, Integer, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from app.models.base import Base, TimestampMixin
from app.models.role import UserRole

if TYPE_CHECKING:
    from app.models.tenant import Tenant
    from app.models.task import Task


class User(Base, TimestampMixin):
    """
    A person belonging to exactly one tenant.

    Email is unique across all tenants (it is the login identifier).
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserRole.MEMBER,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="users")
    assigned_tasks: Mapped[list["Task"]] = relationship("Task", back_populates="assignee")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, tenant_id={self.tenant_id}, role={self.role.value})>"
