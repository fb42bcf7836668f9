from datetime import timedelta
from typing import Optional

from sqlmodel import func, select

from config import ApplicationConfig
from credentialing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from credentialing.api.utils.jwt import create_access_token
from credentialing.domain.entities import Identity, IdentityStatus, RoleAssignment

API = "/api/verification"


class IntegrationConfig(ApplicationConfig):
    DB_URI = "sqlite+aiosqlite:///./test.db"
    API_PREFIX = "/api"
    AUTO_CREATE_SCHEMA = False
    ENABLE_LOGGING_MIDDLEWARE = False
    JWT_SECRET = "integration-test-secret"
    JWT_ALGORITHM = "HS256"
    JWT_AUDIENCE = None
    JWT_ISSUER = None
    EXTERNAL_SUBJECT_TYPE = "cognito"


def auth_headers(subject: str, email: Optional[str] = None) -> dict:
    token = create_access_token(
        IntegrationConfig, subject, email=email, expires_delta=timedelta(minutes=5)
    )
    return {"Authorization": f"Bearer {token}"}


async def count_rows(session_factory, model, *criteria) -> int:
    async with session_factory() as session:
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)
        return (await session.execute(stmt)).scalar_one()


async def fetch_one(session_factory, model, *criteria):
    async with session_factory() as session:
        result = await session.execute(select(model).where(*criteria))
        return result.scalars().first()


async def fetch_all(session_factory, model, *criteria, order_by=None):
    async with session_factory() as session:
        stmt = select(model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def create_staff_identity(session_factory, subject: str, email: str, role: str) -> Identity:
    """Active identity holding one seeded role"""
    async with session_factory() as session:
        uow = SqlAlchemyUnitOfWork(session)
        async with uow:
            identity = await uow.identities.create(
                Identity(
                    external_subject_id=subject,
                    external_subject_type=IntegrationConfig.EXTERNAL_SUBJECT_TYPE,
                    email=email,
                    status=IdentityStatus.active,
                    verified=True,
                    primary_role=role,
                )
            )
            role_row = await uow.rbac.get_role_by_name(role)
            await uow.rbac.save_assignment(
                RoleAssignment(identity_id=identity.id, role_id=role_row.id, assigned_by="seed")
            )
            await uow.commit()
            return identity
