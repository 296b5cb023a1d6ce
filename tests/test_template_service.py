from uuid import uuid4

import pytest

from agenda.core.errors import NotFoundError, ValidationError
from agenda.schemas.template import TemplateCreate, TemplateUpdate
from agenda.services.template.template_service import TemplateService


async def test_create_and_search(db):
    service = TemplateService(db)
    template = await service.create_template(TemplateCreate(
        title="Recordatorio", body="Hola {cliente}, su cita es el {fecha} a las {hora}.",
        attachment_url="https://cdn.example.com/mapa.png", attachment_name="mapa.png",
    ))

    assert template.attachment_url == "https://cdn.example.com/mapa.png"
    assert [t.id for t in await service.search_templates("cita")] == [template.id]


@pytest.mark.parametrize("data", [
    {"title": "", "body": "x"},
    {"title": "x" * 201, "body": "x"},
    {"title": "Ok", "body": "   "},
    {"title": "Ok", "body": "x" * 5001},
    {"title": "Ok", "body": "x", "attachment_url": "ftp://example.com/file"},
])
async def test_validation(db, data):
    with pytest.raises(ValidationError):
        await TemplateService(db).create_template(TemplateCreate(**data))


async def test_duplicate_adds_suffix(db):
    service = TemplateService(db)
    original = await service.create_template(TemplateCreate(title="Aviso", body="Texto"))

    copy = await service.duplicate_template(original.id)
    assert copy.id != original.id
    assert copy.title == "Aviso (Copia)"
    assert copy.body == "Texto"


async def test_update_and_delete(db):
    service = TemplateService(db)
    template = await service.create_template(TemplateCreate(title="Aviso", body="Texto"))

    updated = await service.update_template(template.id, TemplateUpdate(body="Nuevo texto"))
    assert updated.body == "Nuevo texto"
    assert updated.title == "Aviso"

    await service.delete_template(template.id)
    with pytest.raises(NotFoundError):
        await service.get_template(template.id)


async def test_unknown_template(db):
    with pytest.raises(NotFoundError):
        await TemplateService(db).duplicate_template(uuid4())
