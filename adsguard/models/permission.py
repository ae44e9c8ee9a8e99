import uuid as uuid_lib

from sqlalchemy import Boolean, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from adsguard.models.base import Base, TimestampMixin

WILDCARD_ACTION = "*"


class Permission(Base, TimestampMixin):
    """A (module, action) permission record.

    The name follows the ``{module}_{action}`` convention. An action of ``*``
    (name ``{module}_*``) grants every action of the module.
    """

    __tablename__ = "permissions"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    module: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        # (module, action) is only unique among active permissions
        Index(
            "uq_permissions_active_module_action",
            "module",
            "action",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    @property
    def is_wildcard(self) -> bool:
        """Check if this permission covers every action of its module."""
        return self.action == WILDCARD_ACTION
