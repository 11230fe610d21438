from datetime import date, timedelta

import pytest


async def create(client, payload):
    resp = await client.post("/api/users", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_create_and_get_user(client, user_payload):
    created = await create(client, user_payload)
    assert isinstance(created["id"], int)
    assert created["email"] == "a@b.com"
    assert created["firstName"] == "A"
    assert created["birthDate"] == "1990-01-01"
    assert created["phoneNumber"] == "+12345678901"

    resp = await client.get(f"/api/users/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


@pytest.mark.asyncio
async def test_list_users(client, user_payload):
    assert (await client.get("/api/users")).json() == []
    await create(client, user_payload)
    await create(client, {**user_payload, "email": "c@d.com", "phoneNumber": None})
    resp = await client.get("/api/users")
    assert resp.status_code == 200
    assert {u["email"] for u in resp.json()} == {"a@b.com", "c@d.com"}


@pytest.mark.asyncio
async def test_get_unknown_user_is_404(client):
    resp = await client.get("/api/users/12345")
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found with id 12345"}


@pytest.mark.asyncio
async def test_non_integer_id_is_400(client):
    resp = await client.get("/api/users/abc")
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == 400


@pytest.mark.asyncio
async def test_create_reports_every_invalid_field(client):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    resp = await client.post(
        "/api/users",
        json={"email": "not-an-email", "firstName": " ", "birthDate": tomorrow, "phoneNumber": "12345"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["errorCode"] == 400
    assert "timestamp" in body
    assert body["details"] == {
        "email": "Email is not valid.",
        "firstName": "First name should not be empty.",
        "lastName": "Last name should not be empty.",
        "birthDate": "Birth date should be in the past.",
        "phoneNumber": "Phone number is invalid",
    }


@pytest.mark.asyncio
async def test_create_missing_birth_date(client, user_payload):
    payload = {k: v for k, v in user_payload.items() if k != "birthDate"}
    resp = await client.post("/api/users", json=payload)
    assert resp.status_code == 400
    assert resp.json()["details"] == {"birthDate": "Birth date should not be empty."}


@pytest.mark.asyncio
async def test_create_unparseable_birth_date(client, user_payload):
    resp = await client.post("/api/users", json={**user_payload, "birthDate": "01/01/1990"})
    assert resp.status_code == 400
    assert "birthDate" in resp.json()["details"]


@pytest.mark.asyncio
async def test_create_underage_is_400(client, user_payload):
    young = date(date.today().year - 10, 1, 1).isoformat()
    resp = await client.post("/api/users", json={**user_payload, "birthDate": young})
    assert resp.status_code == 400
    assert resp.json() == {"message": "User must be at least 18 years old"}
    assert (await client.get("/api/users")).json() == []


@pytest.mark.asyncio
async def test_duplicate_email_is_409(client, user_payload):
    await create(client, user_payload)
    resp = await client.post(
        "/api/users", json={**user_payload, "firstName": "Other", "phoneNumber": "+19999999999"}
    )
    assert resp.status_code == 409
    body = resp.json()
    assert body["errorCode"] == 409
    assert body["details"] == "Email a@b.com already exists"


@pytest.mark.asyncio
async def test_duplicate_phone_is_409(client, user_payload):
    await create(client, user_payload)
    resp = await client.post("/api/users", json={**user_payload, "email": "x@y.com"})
    assert resp.status_code == 409
    assert resp.json()["details"] == "Phone number +12345678901 already exists"


@pytest.mark.asyncio
async def test_blank_phone_numbers_do_not_collide(client, user_payload):
    first = await create(client, {**user_payload, "phoneNumber": ""})
    second = await create(client, {**user_payload, "email": "x@y.com", "phoneNumber": ""})
    assert first["phoneNumber"] is None
    assert second["phoneNumber"] is None


@pytest.mark.asyncio
async def test_put_replaces_all_fields(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.put(
        f"/api/users/{created['id']}",
        json={"email": "new@b.com", "firstName": "N", "lastName": "M", "birthDate": "1985-03-03"},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "id": created["id"],
        "email": "new@b.com",
        "firstName": "N",
        "lastName": "M",
        "birthDate": "1985-03-03",
        "address": None,
        "phoneNumber": None,
    }


@pytest.mark.asyncio
async def test_put_unknown_user_is_404(client, user_payload):
    resp = await client.put("/api/users/999", json=user_payload)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_put_validates_body(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.put(f"/api/users/{created['id']}", json={**user_payload, "lastName": ""})
    assert resp.status_code == 400
    assert resp.json()["details"] == {"lastName": "Last name should not be empty."}


@pytest.mark.asyncio
async def test_patch_changes_only_supplied_field(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.patch(f"/api/users/{created['id']}", json={"lastName": "Z"})
    assert resp.status_code == 200
    assert resp.json() == {**created, "lastName": "Z"}


@pytest.mark.asyncio
async def test_patch_null_does_not_clear(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.patch(f"/api/users/{created['id']}", json={"address": None, "firstName": "F"})
    assert resp.status_code == 200
    assert resp.json() == {**created, "firstName": "F"}


@pytest.mark.asyncio
async def test_patch_underage_is_400_and_keeps_record(client, user_payload):
    created = await create(client, user_payload)
    young = date(date.today().year - 5, 1, 1).isoformat()
    resp = await client.patch(f"/api/users/{created['id']}", json={"birthDate": young})
    assert resp.status_code == 400
    assert (await client.get(f"/api/users/{created['id']}")).json() == created


@pytest.mark.asyncio
async def test_patch_invalid_phone_is_400(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.patch(f"/api/users/{created['id']}", json={"phoneNumber": "+12"})
    assert resp.status_code == 400
    assert resp.json()["details"] == {"phoneNumber": "Phone number is invalid"}


@pytest.mark.asyncio
async def test_patch_duplicate_email_is_409(client, user_payload):
    await create(client, {**user_payload, "email": "taken@b.com", "phoneNumber": None})
    created = await create(client, user_payload)
    resp = await client.patch(f"/api/users/{created['id']}", json={"email": "taken@b.com"})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_patch_unknown_user_is_404(client):
    resp = await client.patch("/api/users/999", json={"firstName": "F"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_user(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.delete(f"/api/users/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert (await client.get(f"/api/users/{created['id']}")).status_code == 404
    assert (await client.delete(f"/api/users/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_search_by_birth_date_range(client, user_payload):
    await create(client, {**user_payload, "email": "1@b.com", "phoneNumber": None, "birthDate": "1990-01-01"})
    await create(client, {**user_payload, "email": "2@b.com", "phoneNumber": None, "birthDate": "2000-01-01"})

    resp = await client.get("/api/users/search", params={"startDate": "1989-01-01", "endDate": "1990-01-01"})
    assert resp.status_code == 200
    assert [u["email"] for u in resp.json()] == ["1@b.com"]

    resp = await client.get("/api/users/search", params={"startDate": "2000-01-01", "endDate": "2000-01-01"})
    assert [u["email"] for u in resp.json()] == ["2@b.com"]


@pytest.mark.asyncio
async def test_search_start_after_end_is_400(client):
    resp = await client.get("/api/users/search", params={"startDate": "2001-01-01", "endDate": "2000-01-01"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Start date must be before end date"}


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"startDate": "nope", "endDate": "2000-01-01"}, {"startDate": "2000-01-01"}])
async def test_search_bad_or_missing_dates_is_400(client, params):
    resp = await client.get("/api/users/search", params=params)
    assert resp.status_code == 400
    assert resp.json()["errorCode"] == 400


@pytest.mark.asyncio
async def test_request_id_header_and_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "ok"}
    assert resp.headers.get("X-Request-ID")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field, value",
    [("email", "a@b.com\n"), ("phoneNumber", "+12345678901\n")],
)
async def test_trailing_newline_is_not_a_valid_format(client, user_payload, field, value):
    await create(client, user_payload)
    resp = await client.post("/api/users", json={**user_payload, "email": "x@y.com", field: value})
    assert resp.status_code == 400
    assert field in resp.json()["details"]
    assert len((await client.get("/api/users")).json()) == 1


@pytest.mark.asyncio
async def test_patch_trailing_newline_phone_is_400(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.patch(f"/api/users/{created['id']}", json={"phoneNumber": "+19999999999\n"})
    assert resp.status_code == 400
    assert resp.json()["details"] == {"phoneNumber": "Phone number is invalid"}


@pytest.mark.asyncio
async def test_patch_duplicate_phone_is_409(client, user_payload):
    await create(client, {**user_payload, "email": "other@b.com", "phoneNumber": "+19999999999"})
    created = await create(client, user_payload)
    resp = await client.patch(f"/api/users/{created['id']}", json={"phoneNumber": "+19999999999"})
    assert resp.status_code == 409
    assert resp.json()["details"] == "Phone number +19999999999 already exists"
    assert (await client.get(f"/api/users/{created['id']}")).json() == created


@pytest.mark.asyncio
async def test_patch_own_email_and_phone_is_allowed(client, user_payload):
    created = await create(client, user_payload)
    resp = await client.patch(
        f"/api/users/{created['id']}",
        json={"email": "a@b.com", "phoneNumber": "+12345678901", "firstName": "F"},
    )
    assert resp.status_code == 200
    assert resp.json() == {**created, "firstName": "F"}
