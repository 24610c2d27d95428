"""
Integration tests for the lookup admin service.

Runs against the seeded in-memory database; see ``seeded_database`` in
conftest for the fixture rows.
"""

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from petsocial.domain.cache.value_objects import LookupKind
from petsocial.models import PetBreed, PetColor, PetType
from petsocial.services.lookups import LookupAdminService, LookupWrite


@pytest.fixture
async def session(seeded_database):
    async with seeded_database.session_factory() as session:
        yield session


@pytest.fixture
def admin(session, seeded_database):
    return LookupAdminService(session, seeded_database.interceptor)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_appends_after_highest_sort_order(self, admin, session):
        response = await admin.create(LookupKind.PET_TYPE, LookupWrite(name=" Bird "))

        assert response.status is True
        assert response.status_code == 201
        assert response.data.name == "Bird"

        bird = await session.get(PetType, response.data.id)
        assert bird.sort_order == 100

    @pytest.mark.asyncio
    async def test_create_keeps_explicit_sort_order(self, admin, session):
        response = await admin.create(
            LookupKind.PET_COLOR, LookupWrite(name="Brown", sort_order=3)
        )

        assert response.status_code == 201
        assert response.data.name == "Brown"

    @pytest.mark.asyncio
    async def test_name_required(self, admin):
        response = await admin.create(LookupKind.PET_FOOD, LookupWrite(name="   "))

        assert response.status is False
        assert response.status_code == 400
        assert response.data is None

    @pytest.mark.asyncio
    async def test_duplicate_name_is_case_insensitive(self, admin):
        response = await admin.create(LookupKind.PET_TYPE, LookupWrite(name=" dOG"))

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_user_type_fields(self, admin):
        response = await admin.create(
            LookupKind.USER_TYPE,
            LookupWrite(name="Vet", description="Clinic", image_path="/img/vet.png"),
        )

        assert response.status_code == 201
        assert response.data.description == "Clinic"
        assert response.data.image_path == "/img/vet.png"

    @pytest.mark.asyncio
    async def test_breed_requires_pet_type(self, admin):
        response = await admin.create(LookupKind.PET_BREED, LookupWrite(name="Pug"))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_breed_requires_existing_pet_type(self, admin):
        response = await admin.create(
            LookupKind.PET_BREED, LookupWrite(name="Pug", pet_type_id=42)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_breed_names_unique_per_pet_type(self, admin, session):
        duplicate = await admin.create(
            LookupKind.PET_BREED, LookupWrite(name="beagle", pet_type_id=1)
        )
        other_type = await admin.create(
            LookupKind.PET_BREED, LookupWrite(name="Beagle", pet_type_id=2)
        )

        assert duplicate.status_code == 409
        assert other_type.status_code == 201

        breed = await session.get(PetBreed, other_type.data.id)
        assert breed.pet_type_id == 2
        assert breed.sort_order == 2


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_not_found(self, admin):
        response = await admin.update(
            LookupKind.PET_COLOR, 999, LookupWrite(name="Grey")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_duplicate(self, admin):
        response = await admin.update(
            LookupKind.PET_COLOR, 1, LookupWrite(name="white")
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_update_same_name_allowed(self, admin):
        response = await admin.update(
            LookupKind.PET_COLOR, 1, LookupWrite(name="Black", sort_order=5)
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_update_renames(self, admin, session):
        response = await admin.update(
            LookupKind.PET_FOOD, 2, LookupWrite(name="Raw")
        )

        assert response.status is True
        assert response.data.name == "Raw"

    @pytest.mark.asyncio
    async def test_breed_moved_to_unknown_pet_type(self, admin):
        response = await admin.update(
            LookupKind.PET_BREED, 1, LookupWrite(name="Labrador", pet_type_id=42)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_breed_moved_to_other_pet_type(self, admin, session):
        response = await admin.update(
            LookupKind.PET_BREED, 1, LookupWrite(name="Labrador", pet_type_id=2)
        )

        assert response.status_code == 200
        breed = await session.get(PetBreed, 1)
        assert breed.pet_type_id == 2


class TestDelete:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,id",
        [
            (LookupKind.PET_TYPE, 3),
            (LookupKind.PET_BREED, 3),
            (LookupKind.PET_COLOR, 3),
            (LookupKind.USER_TYPE, 1),
        ],
    )
    async def test_protected_rows(self, admin, kind, id):
        response = await admin.delete(kind, id)

        assert response.status is False
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_not_found(self, admin):
        response = await admin.delete(LookupKind.PET_FOOD, 999)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, admin, session):
        response = await admin.delete(LookupKind.PET_BREED, 2)

        assert response.status is True
        assert response.status_code == 200
        result = await session.execute(select(PetBreed.name).order_by(PetBreed.id))
        assert "Beagle" not in result.scalars().all()


class TestStoreFailure:
    @pytest.fixture
    async def rejecting_colors(self, seeded_database):
        async with seeded_database.engine.begin() as conn:
            await conn.execute(
                text(
                    "CREATE TRIGGER reject_colors BEFORE INSERT ON pet_colors "
                    "BEGIN SELECT RAISE(ABORT, 'store rejected write'); END"
                )
            )
        yield
        async with seeded_database.engine.begin() as conn:
            await conn.execute(text("DROP TRIGGER IF EXISTS reject_colors"))

    @pytest.mark.asyncio
    async def test_failed_write_rolls_back_session(
        self, admin, session, rejecting_colors
    ):
        with pytest.raises(IntegrityError):
            await admin.create(LookupKind.PET_COLOR, LookupWrite(name="Brown"))

        assert not session.in_transaction()
        await session.commit()
        result = await session.execute(select(PetColor.name))
        assert "Brown" not in result.scalars().all()

    @pytest.mark.asyncio
    async def test_session_usable_after_failed_write(self, admin, rejecting_colors):
        with pytest.raises(IntegrityError):
            await admin.create(LookupKind.PET_COLOR, LookupWrite(name="Brown"))

        response = await admin.create(LookupKind.PET_FOOD, LookupWrite(name="Raw"))

        assert response.status_code == 201
        assert response.data.name == "Raw"
