import time
from datetime import datetime

ACME = {"name": "Acme Inc", "email": "info@one.com", "phone": "111"}
BETA = {"name": "Beta", "email": "sales@acme.io", "phone": "222"}
GAMMA = {"name": "Gamma", "email": "g@three.com", "phone": "333", "company": "Acme Holdings"}


def _create(client, headers, body):
    r = client.post("/customers", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r


def _list(client, headers, **params):
    r = client.get("/customers", params=params, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_create_then_list_round_trip(client, login_as):
    headers = login_as("alice")
    me = client.get("/whoami", headers=headers).json()

    r = _create(client, headers, {"name": "A", "email": "a@x.com", "phone": "1"})
    assert r.json() == {"message": "Customer created successfully"}

    rows = _list(client, headers)
    assert len(rows) == 1
    row = rows[0]
    assert (row["name"], row["email"], row["phone"]) == ("A", "a@x.com", "1")
    assert row["company"] is None
    assert row["user_id"] == me["id"]
    assert row["created_at"] and row["updated_at"]


def test_create_requires_auth(client):
    r = client.post("/customers", json={"name": "A", "email": "a@x.com", "phone": "1"})
    assert r.status_code == 401


def test_create_validation(client, login_as):
    headers = login_as("alice")

    r = client.post("/customers", json={"name": "", "email": "not-an-email", "phone": ""}, headers=headers)
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert fields == {"name", "email", "phone"}

    r = client.post("/customers", json={"name": "A", "email": "a@x.com"}, headers=headers)
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["phone"]


def test_duplicate_email_is_rejected_globally(client, login_as):
    alice = login_as("alice")
    bob = login_as("bob")

    _create(client, alice, {"name": "A", "email": "a@x.com", "phone": "1"})
    r = client.post("/customers", json={"name": "B", "email": "a@x.com", "phone": "2"}, headers=bob)
    assert r.status_code == 400
    assert r.json() == {"error": "Email already exists"}
    assert _list(client, bob) == []


def test_customers_are_scoped_to_owner(client, login_as):
    alice = login_as("alice")
    bob = login_as("bob")

    _create(client, alice, ACME)
    _create(client, alice, BETA)
    _create(client, bob, GAMMA)

    alice_rows = _list(client, alice)
    bob_rows = _list(client, bob)
    assert {r["email"] for r in alice_rows} == {ACME["email"], BETA["email"]}
    assert [r["email"] for r in bob_rows] == [GAMMA["email"]]


def test_list_is_newest_first(client, login_as):
    headers = login_as("alice")
    _create(client, headers, ACME)
    _create(client, headers, BETA)
    _create(client, headers, GAMMA)

    names = [r["name"] for r in _list(client, headers)]
    assert names == ["Gamma", "Beta", "Acme Inc"]


def test_search_and_company_filters(client, login_as):
    headers = login_as("alice")
    for body in (ACME, BETA, GAMMA):
        _create(client, headers, body)

    def names(**params):
        return sorted(r["name"] for r in _list(client, headers, **params))

    # name OR email OR phone
    assert names(search="acme") == ["Acme Inc", "Beta"]
    assert names(search="22") == ["Beta"]
    assert names(search="") == ["Acme Inc", "Beta", "Gamma"]
    assert names() == ["Acme Inc", "Beta", "Gamma"]

    # company is AND'ed with search
    assert names(company="Holdings") == ["Gamma"]
    assert names(company="Holdings", search="acme") == []
    assert names(company="Holdings", search="three") == ["Gamma"]

    # wildcards in input are literal
    assert names(search="%") == []
    assert names(search="_") == []


def test_update_only_company_keeps_other_fields(client, login_as):
    headers = login_as("alice")
    _create(client, headers, ACME)
    before = _list(client, headers)[0]

    time.sleep(0.01)
    r = client.put(f"/customers/{before['id']}", json={"company": "Acme Worldwide"}, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Customer updated successfully"}

    after = _list(client, headers)[0]
    assert after["company"] == "Acme Worldwide"
    for field in ("name", "email", "phone", "user_id", "created_at"):
        assert after[field] == before[field]
    assert datetime.fromisoformat(after["updated_at"]) > datetime.fromisoformat(before["updated_at"])


def test_update_null_fields_are_retained(client, login_as):
    headers = login_as("alice")
    _create(client, headers, GAMMA)
    row = _list(client, headers)[0]

    r = client.put(f"/customers/{row['id']}", json={"name": None, "phone": "999"}, headers=headers)
    assert r.status_code == 200

    after = _list(client, headers)[0]
    assert after["name"] == "Gamma"
    assert after["phone"] == "999"
    assert after["company"] == "Acme Holdings"


def test_update_validation(client, login_as):
    headers = login_as("alice")
    _create(client, headers, ACME)
    row = _list(client, headers)[0]

    r = client.put(f"/customers/{row['id']}", json={"email": "nope", "name": ""}, headers=headers)
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"email", "name"}


def test_update_to_taken_email(client, login_as):
    headers = login_as("alice")
    _create(client, headers, ACME)
    _create(client, headers, BETA)
    beta = next(r for r in _list(client, headers) if r["name"] == "Beta")

    r = client.put(f"/customers/{beta['id']}", json={"email": ACME["email"]}, headers=headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Email already exists"}


def test_update_foreign_or_missing_customer_is_not_found(client, login_as):
    alice = login_as("alice")
    bob = login_as("bob")
    _create(client, alice, ACME)
    row = _list(client, alice)[0]

    r = client.put(f"/customers/{row['id']}", json={"name": "Stolen"}, headers=bob)
    assert r.status_code == 404
    assert r.json() == {"error": "Customer not found"}

    r = client.put("/customers/9999", json={"name": "Ghost"}, headers=alice)
    assert r.status_code == 404

    assert _list(client, alice)[0]["name"] == "Acme Inc"


def test_delete(client, login_as):
    alice = login_as("alice")
    bob = login_as("bob")
    _create(client, alice, ACME)
    _create(client, alice, BETA)
    acme = next(r for r in _list(client, alice) if r["name"] == "Acme Inc")

    assert client.delete(f"/customers/{acme['id']}", headers=bob).status_code == 404
    assert client.delete("/customers/9999", headers=alice).status_code == 404

    r = client.delete(f"/customers/{acme['id']}", headers=alice)
    assert r.status_code == 200
    assert r.json() == {"message": "Customer deleted successfully"}

    assert [r["name"] for r in _list(client, alice)] == ["Beta"]
    assert client.delete(f"/customers/{acme['id']}", headers=alice).status_code == 404


def test_email_is_stored_exactly_as_sent(client, login_as):
    headers = login_as("alice")

    _create(client, headers, {"name": "Bob", "email": "Bob@Example.COM", "phone": "1"})
    assert [r["email"] for r in _list(client, headers)] == ["Bob@Example.COM"]

    # uniqueness compares the raw string
    _create(client, headers, {"name": "Bob 2", "email": "Bob@example.com", "phone": "2"})
    assert sorted(r["email"] for r in _list(client, headers)) == ["Bob@Example.COM", "Bob@example.com"]

    r = client.post("/customers", json={"name": "Bob 3", "email": "Bob@Example.COM", "phone": "3"}, headers=headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Email already exists"}


def test_update_email_is_stored_exactly_as_sent(client, login_as):
    headers = login_as("alice")
    _create(client, headers, ACME)
    row = _list(client, headers)[0]

    r = client.put(f"/customers/{row['id']}", json={"email": "Info@One.COM"}, headers=headers)
    assert r.status_code == 200
    assert _list(client, headers)[0]["email"] == "Info@One.COM"


def test_display_name_email_is_rejected(client, login_as):
    headers = login_as("alice")

    r = client.post("/customers", json={"name": "Carol", "email": "Carol <carol@x.com>", "phone": "1"}, headers=headers)
    assert r.status_code == 400
    assert [e["field"] for e in r.json()["errors"]] == ["email"]
    assert _list(client, headers) == []
