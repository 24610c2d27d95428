"""
PetSocial Database Models

SQLAlchemy models for the read-mostly lookup tables.
Every cached lookup list is derived from exactly one of these tables.
"""

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..constants import DEFAULT_SORT_ORDER

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Canonical Base class for all database models."""

    pass


class SortOrderMixin:
    """Mixin for admin-controlled display ordering."""

    sort_order: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_SORT_ORDER, nullable=False
    )


class PetType(Base, SortOrderMixin):
    """Pet type (dog, cat, ...) with an optional image."""

    __tablename__ = "pet_types"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    image_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    breeds: Mapped[list["PetBreed"]] = relationship(
        "PetBreed", back_populates="pet_type", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<PetType(id={self.id}, name={self.name})>"


class PetBreed(Base, SortOrderMixin):
    """Breed partitioned by its pet type."""

    __tablename__ = "pet_breeds"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    pet_type_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("pet_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Relationships
    pet_type: Mapped["PetType"] = relationship("PetType", back_populates="breeds")

    def __repr__(self) -> str:
        return (
            f"<PetBreed(id={self.id}, pet_type_id={self.pet_type_id}, "
            f"name={self.name})>"
        )


class PetColor(Base, SortOrderMixin):
    """Coat color."""

    __tablename__ = "pet_colors"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<PetColor(id={self.id}, name={self.name})>"


class PetFood(Base, SortOrderMixin):
    """Food preference."""

    __tablename__ = "pet_foods"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<PetFood(id={self.id}, name={self.name})>"


class UserType(Base):
    """Account type. Has no sort column; lists come back in store order."""

    __tablename__ = "user_types"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    image_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<UserType(id={self.id}, name={self.name})>"


