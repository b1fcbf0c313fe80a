"""
Test per DriverService e BrokerService.
"""

import pydantic
import pytest

from app.schemas.driver import DriverCreate, DriverStatus, DriverUpdate


class TestDriverService:
    """Test CRUD autisti."""

    async def test_create_and_get(self, driver_service, driver):
        found = await driver_service.get_by_id(driver.id)
        assert found == driver
        assert found.status == DriverStatus.ACTIVE

    async def test_unknown_id_returns_none(self, driver_service):
        assert await driver_service.get_by_id("missing") is None

    async def test_filter_by_status(self, driver_service, driver):
        await driver_service.create(
            DriverCreate(name="Mike Johnson", truck_number="TRK-002", status=DriverStatus.INACTIVE)
        )
        active = await driver_service.get_all(status=DriverStatus.ACTIVE)
        assert [d.name for d in active] == ["John Smith"]
        assert len(await driver_service.get_all()) == 2

    async def test_update_only_given_fields(self, driver_service, driver):
        updated = await driver_service.update(driver.id, DriverUpdate(truck_number="TRK-099"))
        assert updated.truck_number == "TRK-099"
        assert updated.name == "John Smith"
        assert (await driver_service.get_by_id(driver.id)).truck_number == "TRK-099"

    async def test_update_unknown_returns_none(self, driver_service):
        assert await driver_service.update("missing", DriverUpdate(name="X")) is None

    async def test_delete(self, driver_service, driver):
        assert await driver_service.delete(driver.id) is True
        assert await driver_service.get_by_id(driver.id) is None
        assert await driver_service.delete(driver.id) is False

    async def test_seed_only_when_empty(self, driver_service):
        assert await driver_service.seed_defaults() == 5
        assert await driver_service.seed_defaults() == 0
        drivers = await driver_service.get_all()
        assert [d.truck_number for d in drivers] == [f"TRK-00{i}" for i in range(1, 6)]

    def test_blank_email_means_no_email(self):
        data = DriverCreate(name="Sarah Davis", truck_number="TRK-003", email="  ")
        assert data.email is None

    def test_name_and_truck_required(self):
        with pytest.raises(pydantic.ValidationError):
            DriverCreate(name="", truck_number="TRK-003")


class TestBrokerService:
    """Test elenco broker per l'autocompletamento."""

    async def test_register_deduplicates(self, broker_service):
        assert await broker_service.register("CH Robinson") is True
        assert await broker_service.register("CH Robinson") is False
        assert await broker_service.get_all() == ["CH Robinson"]

    async def test_blank_name_not_registered(self, broker_service):
        assert await broker_service.register("   ") is False
        assert await broker_service.get_all() == []

    async def test_suggest_substring_case_insensitive(self, broker_service):
        for name in ("CH Robinson", "TQL", "Coyote Logistics", "Echo Global Logistics"):
            await broker_service.register(name)
        assert await broker_service.suggest("logis") == ["Coyote Logistics", "Echo Global Logistics"]
        assert await broker_service.suggest("rob") == ["CH Robinson"]

    async def test_empty_query_suggests_nothing(self, broker_service):
        await broker_service.register("TQL")
        assert await broker_service.suggest("") == []

    async def test_suggest_limit(self, broker_service):
        for i in range(5):
            await broker_service.register(f"Broker {i}")
        assert len(await broker_service.suggest("broker", limit=3)) == 3

    async def test_seed_defaults_only_when_empty(self, broker_service):
        assert await broker_service.seed_defaults(["TQL", "Landstar"]) == 2
        assert await broker_service.seed_defaults(["Other"]) == 0
        assert await broker_service.get_all() == ["TQL", "Landstar"]


class TestDriverUpdateNulls:
    """Null espliciti nei campi obbligatori non devono raggiungere l'archivio."""

    @pytest.mark.parametrize("field", ["name", "truck_number", "license_number", "phone", "status"])
    def test_null_rejected(self, field):
        with pytest.raises(pydantic.ValidationError):
            DriverUpdate.model_validate({field: None})

    def test_null_email_allowed(self):
        assert DriverUpdate.model_validate({"email": None}).email is None

    async def test_collection_stays_readable(self, driver_service, driver):
        updated = await driver_service.update(driver.id, DriverUpdate.model_validate({"email": None}))
        assert updated.email is None
        assert updated.name == "John Smith"

        drivers = await driver_service.get_all()
        assert [d.truck_number for d in drivers] == ["TRK-001"]
        assert (await driver_service.get_by_id(driver.id)).email is None
