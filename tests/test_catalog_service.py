from uuid import uuid4

import pytest

from agenda.core.errors import NotFoundError, ValidationError
from agenda.schemas.catalog import ServiceCreate, ServiceUpdate, SubServiceCreate, SubServiceUpdate
from agenda.services.catalog.catalog_service import CatalogService


async def test_create_service_and_sub_service(db):
    catalog = CatalogService(db)
    service = await catalog.create_service(ServiceCreate(name="Manicura"))
    sub_service = await catalog.create_sub_service(
        SubServiceCreate(service_id=service.id, name="Esmaltado", price=40000)
    )

    assert sub_service.service_id == service.id
    assert [s.id for s in await catalog.list_sub_services(service.id)] == [sub_service.id]


async def test_negative_price_rejected(db, seed):
    with pytest.raises(ValidationError):
        await CatalogService(db).create_sub_service(
            SubServiceCreate(service_id=seed.service.id, name="Gratis", price=-1)
        )


async def test_sub_service_needs_existing_service(db):
    with pytest.raises(NotFoundError):
        await CatalogService(db).create_sub_service(SubServiceCreate(service_id=uuid4(), name="X", price=1))


async def test_update_price(db, seed):
    updated = await CatalogService(db).update_sub_service(seed.s1.id, SubServiceUpdate(price=55000))
    assert updated.price == 55000
    assert updated.name == "Corte"


async def test_rename_service(db, seed):
    updated = await CatalogService(db).update_service(seed.service.id, ServiceUpdate(name="Estética"))
    assert updated.name == "Estética"


async def test_deleted_sub_service_hidden(db, seed):
    catalog = CatalogService(db)
    await catalog.delete_sub_service(seed.s2.id)

    assert [s.id for s in await catalog.list_sub_services()] == [seed.s1.id]
    with pytest.raises(NotFoundError):
        await catalog.get_sub_service(seed.s2.id)
