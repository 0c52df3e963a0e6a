"""Concrete repository implementation for profiles backed by SQLAlchemy."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnpass.application.interfaces import ProfileRepository
from learnpass.domain.entities import Profile
from learnpass.domain.identity import IdentityResolver
from learnpass.infrastructure.database.dialect import as_utc
from learnpass.infrastructure.database.models import ProfileModel

logger = logging.getLogger(__name__)


class SQLAlchemyProfileRepository(ProfileRepository):
    """Implements the ProfileRepository port.

    ``get_or_create`` derives the canonical id with the same IdentityResolver
    the request path uses, so both always agree.
    """

    def __init__(self, session: AsyncSession, resolver: IdentityResolver):
        self._session = session
        self._resolver = resolver

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Map ORM model → domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            full_name=model.full_name,
            role=model.role,
            status=model.status,
            auth_provider=model.auth_provider,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def get_by_id(self, profile_id: str) -> Profile | None:
        result = await self._session.get(ProfileModel, profile_id)
        return self._to_entity(result) if result else None

    async def get_or_create(
        self,
        external_id: str,
        full_name: str,
        email: str,
        role: str = "student",
    ) -> str:
        """Return the canonical id, creating or adopting the profile as needed.

        Runs in its own savepoint: a database error here leaves the caller's
        transaction usable.
        """
        user_id = self._resolver.resolve(external_id)
        async with self._session.begin_nested():
            await self._get_or_create(user_id, full_name=full_name, email=email, role=role)
        return user_id

    async def _get_or_create(self, user_id: str, *, full_name: str, email: str, role: str) -> None:
        model = await self._session.get(ProfileModel, user_id)
        if model is not None:
            self._merge(model, full_name=full_name, email=email, role=role)
            await self._session.flush()
            return

        if email:
            stmt = select(ProfileModel).where(ProfileModel.email == email).limit(1)
            by_email = (await self._session.execute(stmt)).scalar_one_or_none()
            if by_email is not None:
                logger.info("Re-keying profile %s to canonical id %s", by_email.id, user_id)
                by_email.id = user_id
                self._merge(by_email, full_name=full_name, email=email, role=role)
                await self._session.flush()
                return

        try:
            async with self._session.begin_nested():
                self._session.add(
                    ProfileModel(
                        id=user_id,
                        full_name=full_name,
                        email=email,
                        role=role,
                        auth_provider="clerk",
                    )
                )
        except IntegrityError:
            # A concurrent request created the same profile first.
            model = await self._session.get(ProfileModel, user_id, populate_existing=True)
            if model is None:
                raise
            self._merge(model, full_name=full_name, email=email, role=role)
            await self._session.flush()

    def _merge(self, model: ProfileModel, *, full_name: str, email: str, role: str) -> None:
        """Apply the entity's first-write-wins rule to the stored row."""
        profile = self._to_entity(model)
        profile.merge_missing(full_name=full_name, email=email, role=role, auth_provider="clerk")
        model.full_name = profile.full_name
        model.email = profile.email
        model.role = profile.role
        model.auth_provider = profile.auth_provider
        model.updated_at = profile.updated_at
