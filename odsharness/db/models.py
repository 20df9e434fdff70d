"""Database models for the admin and security databases."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class AdminBase(DeclarativeBase):
    pass


class SecurityBase(DeclarativeBase):
    pass


# --- Admin database ---


api_client_education_organizations = Table(
    "api_client_education_organizations",
    AdminBase.metadata,
    Column("api_client_id", ForeignKey("api_clients.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "application_education_organization_id",
        ForeignKey("application_education_organizations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Vendor(AdminBase):
    __tablename__ = "vendors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    namespace_prefixes: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    users: Mapped[list[User]] = relationship(
        back_populates="vendor", cascade="all, delete-orphan"
    )
    applications: Mapped[list[Application]] = relationship(
        back_populates="vendor", cascade="all, delete-orphan"
    )


class User(AdminBase):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(150), nullable=False)
    full_name: Mapped[str] = mapped_column(String(150), default="")
    vendor_id: Mapped[int] = mapped_column(ForeignKey("vendors.id"), nullable=False)

    vendor: Mapped[Vendor] = relationship(back_populates="users")


class Application(AdminBase):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("vendor_id", "name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    claim_set_name: Mapped[str] = mapped_column(String(255), nullable=False)
    operational_context_uri: Mapped[str] = mapped_column(String(2048), default="uri://ed-fi.org")
    vendor_id: Mapped[int] = mapped_column(ForeignKey("vendors.id"), nullable=False)

    vendor: Mapped[Vendor] = relationship(back_populates="applications")
    api_clients: Mapped[list[ApiClient]] = relationship(
        back_populates="application", cascade="all, delete-orphan"
    )
    education_organizations: Mapped[list[ApplicationEducationOrganization]] = relationship(
        back_populates="application", cascade="all, delete-orphan"
    )


class ApplicationEducationOrganization(AdminBase):
    __tablename__ = "application_education_organizations"
    __table_args__ = (UniqueConstraint("application_id", "education_organization_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    education_organization_id: Mapped[int] = mapped_column(Integer, nullable=False)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id"), nullable=False)

    application: Mapped[Application] = relationship(back_populates="education_organizations")
    api_clients: Mapped[list[ApiClient]] = relationship(
        secondary=api_client_education_organizations,
        back_populates="education_organizations",
    )


class ApiClient(AdminBase):
    __tablename__ = "api_clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    key: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    secret: Mapped[str] = mapped_column(String(100), nullable=False)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=True)
    use_sandbox: Mapped[bool] = mapped_column(Boolean, default=False)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id"), nullable=False)

    application: Mapped[Application] = relationship(back_populates="api_clients")
    education_organizations: Mapped[list[ApplicationEducationOrganization]] = relationship(
        secondary=api_client_education_organizations,
        back_populates="api_clients",
    )


# --- Security database ---


class SecurityApplication(SecurityBase):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)

    claim_sets: Mapped[list[ClaimSet]] = relationship(
        back_populates="application", cascade="all, delete-orphan"
    )


class ClaimSet(SecurityBase):
    __tablename__ = "claim_sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id"), nullable=False)

    application: Mapped[SecurityApplication] = relationship(back_populates="claim_sets")
