from uuid import uuid4


async def create_booking(api, seed, **overrides):
    payload = {
        "client_id": str(seed.c1.id),
        "scheduled_at": "2025-06-01T14:00:00Z",
        "sub_service_ids": [str(seed.s1.id), str(seed.s2.id)],
    }
    payload.update(overrides)
    return await api.post("/api/v1/appointments", json=payload)


async def test_health(api):
    response = await api.get("/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_book_appointment(api, seed):
    response = await create_booking(api, seed, send_reminder=True)

    assert response.status_code == 201
    body = response.json()
    assert body["total_amount"] == 80000
    assert body["client_name"] == "Ana Benítez"
    assert sorted(item["price"] for item in body["line_items"]) == [30000, 50000]
    assert body["reminder"]["status"] == "pending"
    assert body["reminder"]["send_at"].startswith("2025-06-01T13:00:00")
    assert response.headers["X-Correlation-ID"]


async def test_empty_selection_is_400(api, seed):
    response = await create_booking(api, seed, sub_service_ids=[])

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_missing_sub_service_is_400(api, seed):
    missing = str(uuid4())
    response = await create_booking(api, seed, sub_service_ids=[str(seed.s1.id), missing])

    assert response.status_code == 400
    error = response.json()["error"]
    assert missing in error["message"]
    assert error["details"]["missing_sub_service_ids"] == [missing]


async def test_unknown_client_is_404(api, seed):
    response = await create_booking(api, seed, client_id=str(uuid4()))
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_reminder_without_contact_is_422(api, seed):
    response = await create_booking(api, seed, client_id=str(seed.c2.id), send_reminder=True)
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "BUSINESS_ERROR"


async def test_bad_timestamp_is_400(api, seed):
    response = await create_booking(api, seed, scheduled_at="ayer a la tarde")
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid date format"


async def test_malformed_body_is_400(api, seed):
    response = await create_booking(api, seed, client_id="not-a-uuid")
    assert response.status_code == 400
    assert "client_id" in response.json()["error"]["details"]


async def test_update_cancel_restore(api, seed):
    appointment_id = (await create_booking(api, seed)).json()["id"]

    response = await api.patch(
        f"/api/v1/appointments/{appointment_id}",
        json={"sub_service_ids": [str(seed.s2.id)]},
    )
    assert response.status_code == 200
    assert response.json()["total_amount"] == 30000
    assert len(response.json()["line_items"]) == 1

    response = await api.post(f"/api/v1/appointments/{appointment_id}/cancel")
    assert response.json()["cancelled"] is True
    assert len(response.json()["line_items"]) == 1

    response = await api.post(f"/api/v1/appointments/{appointment_id}/restore")
    assert response.json()["cancelled"] is False


async def test_get_unknown_appointment(api, seed):
    response = await api.get(f"/api/v1/appointments/{uuid4()}")
    assert response.status_code == 404


async def test_daily_count(api, seed):
    await create_booking(api, seed)
    await create_booking(api, seed, scheduled_at="2025-06-02T09:00:00Z")

    response = await api.get("/api/v1/appointments/stats/daily", params={"day": "2025-06-01", "tz": "UTC"})

    assert response.status_code == 200
    assert response.json() == {"day": "2025-06-01", "timezone": "UTC", "total_appointments": 1}


async def test_list_appointments_by_range(api, seed):
    await create_booking(api, seed)
    await create_booking(api, seed, scheduled_at="2025-07-01T09:00:00Z")

    response = await api.get(
        "/api/v1/appointments",
        params={"start": "2025-06-01T00:00:00Z", "end": "2025-06-30T23:59:59Z"},
    )
    assert response.json()["total"] == 1


async def test_client_endpoints(api, seed):
    response = await api.post("/api/v1/clients", json={"name": "Pedro Gómez", "contact": "0971555666"})
    assert response.status_code == 201
    client_id = response.json()["id"]

    await create_booking(api, seed, client_id=client_id)

    stats = (await api.get(f"/api/v1/clients/{client_id}/stats")).json()
    assert stats["total_billed"] == 80000
    assert stats["appointment_count"] == 1

    history = (await api.get(f"/api/v1/clients/{client_id}/appointments")).json()
    assert history["total"] == 1

    assert (await api.delete(f"/api/v1/clients/{client_id}")).status_code == 204
    assert (await api.get(f"/api/v1/clients/{client_id}")).status_code == 404


async def test_catalog_endpoints(api, seed):
    response = await api.post(
        "/api/v1/catalog/sub-services",
        json={"service_id": str(seed.service.id), "name": "Peinado", "price": 45000},
    )
    assert response.status_code == 201

    listing = (await api.get("/api/v1/catalog/sub-services")).json()
    assert listing["total"] == 3


async def test_template_endpoints(api):
    response = await api.post("/api/v1/templates", json={"title": "Aviso", "body": "Hola {cliente}"})
    assert response.status_code == 201
    template_id = response.json()["id"]

    copy = await api.post(f"/api/v1/templates/{template_id}/duplicate")
    assert copy.json()["title"] == "Aviso (Copia)"


async def test_reminder_endpoints(api, seed):
    response = await api.post("/api/v1/reminders", json={
        "client_id": str(seed.c1.id),
        "recipient": "+595981111111",
        "send_at": "2025-06-01T13:00:00Z",
    })
    assert response.status_code == 201
    reminder_id = response.json()["id"]

    pending = (await api.get("/api/v1/reminders/pending")).json()
    assert [r["id"] for r in pending] == [reminder_id]

    response = await api.patch(
        f"/api/v1/reminders/{reminder_id}/status",
        json={"status": "sent", "response_payload": {"sid": "SM1"}},
    )
    assert response.json()["status"] == "sent"
    assert response.json()["sent_at"] is not None

    count = (await api.get("/api/v1/reminders/count", params={"status": "sent"})).json()
    assert count == {"status": "sent", "total": 1}
