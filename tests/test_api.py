from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from richter.dependencies import get_account_repository
from richter.main import create_app
from richter.utils.auth_utils import create_access_token
from richter.utils.codes import format_code


def register(client, email, **extra):
    res = client.post("/users", json={"email": email, "name": "Ann", **extra})
    assert res.status_code == 200
    return res.json()


def promote(client, email):
    user_id = register(client, email)["insertedId"]
    res = client.patch(f"/users/admin/{user_id}")
    assert res.json()["modifiedCount"] == 1
    return user_id


class SpyAccounts:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        async def record(*args, **kwargs):
            self.calls.append(name)

        return record


def test_root(client):
    assert client.get("/").json() == {"message": "richter restaurant server"}


def test_issue_token(client):
    res = client.post("/jwt", json={"email": "a@x.com", "name": "Ann"})
    assert res.status_code == 200
    assert res.json()["token"].count(".") == 2


def test_issue_token_requires_email(client):
    assert client.post("/jwt", json={"name": "Ann"}).status_code == 422


def test_missing_credential_rejected_before_store_access(app, client):
    spy = SpyAccounts()
    app.dependency_overrides[get_account_repository] = lambda: spy

    res = client.get("/users")

    assert res.status_code == 401
    assert res.json() == {"message": "Forbidden access"}
    assert spy.calls == []


def test_invalid_credential_rejected(client):
    res = client.get("/users", headers={"Authorization": "Bearer BOGUS"})
    assert res.status_code == 401
    assert res.json() == {"message": "Forbidden access"}


def test_admin_route_forbidden_for_standard_account(client, auth_header):
    register(client, "c@z.com")
    res = client.get("/users", headers=auth_header("c@z.com"))
    assert res.status_code == 403
    assert res.json() == {"message": "forbidden access"}


def test_admin_route_forbidden_for_unknown_identity(client, auth_header):
    assert client.get("/admin-stats", headers=auth_header("ghost@z.com")).status_code == 403


def test_promoted_admin_lists_accounts_without_codes(client, auth_header):
    promote(client, "b@y.com")
    register(client, "c@z.com")

    res = client.get("/users", headers=auth_header("b@y.com"))

    assert res.status_code == 200
    users = res.json()
    assert {u["email"] for u in users} == {"b@y.com", "c@z.com"}
    assert all("verificationCode" not in u for u in users)


def test_duplicate_registration_is_soft_success(client):
    register(client, "a@x.com")
    assert register(client, "a@x.com") == {"message": "user already exists", "insertedId": None}


def test_registration_reports_mail_failure(client, mailer):
    mailer.fail = True
    body = register(client, "a@x.com")
    assert body["insertedId"]
    assert body["emailSent"] is False
    assert "warning" in body


def test_verification_flow(client, mailer, identity_provider):
    register(client, "a@x.com", uid="fb-1")
    link = mailer.sent[0]["body"].split("http://testserver")[1].split()[0]

    assert client.get("/checkValid/a@x.com").json()["verified"] is False
    first = client.get(link).json()
    again = client.get(link).json()

    assert first == {"verified": True, "email": "a@x.com", "alreadyVerified": False}
    assert again["alreadyVerified"] is True
    status = client.get("/checkValid/a@x.com").json()
    assert status["verified"] is True
    assert "verificationCode" not in status
    assert identity_provider.verified == ["fb-1"]


def test_verify_unknown_code(client):
    res = client.get(f"/verify/{format_code(1)}")
    assert res.status_code == 200
    assert res.json()["verified"] is False


def test_verify_non_ascii_digits_is_unknown_code(client):
    for path in ("/verify/%C2%B2", "/verify/" + "%C2%B2" * 8, "/verify/1234567"):
        res = client.get(path)
        assert res.status_code == 200
        assert res.json()["verified"] is False


def test_resend_and_check_unknown_email(client):
    assert client.get("/sendMail/nobody@x.com").json()["sent"] is False
    assert client.get("/checkValid/nobody@x.com").json()["message"] == "user not found"


def test_resend_mail_failure_is_reported(client, mailer):
    register(client, "a@x.com")
    mailer.fail = True
    res = client.get("/sendMail/a@x.com")
    assert res.status_code == 502
    assert res.json() == {"message": "email unavailable"}


def test_force_verify(client):
    register(client, "a@x.com")
    assert client.put("/user/a@x.com").json()["modifiedCount"] == 1
    assert client.get("/checkValid/a@x.com").json()["verified"] is True


def test_is_admin_check_is_self_only(client, auth_header):
    promote(client, "b@y.com")
    register(client, "c@z.com")

    assert client.get("/users/admin/b@y.com", headers=auth_header("b@y.com")).json() == {"admin": True}
    assert client.get("/users/admin/c@z.com", headers=auth_header("c@z.com")).json() == {"admin": False}
    assert client.get("/users/admin/b@y.com", headers=auth_header("c@z.com")).status_code == 403


def test_admin_deletes_account(client, auth_header, identity_provider):
    promote(client, "b@y.com")
    victim = register(client, "c@z.com")["insertedId"]

    res = client.delete(f"/users/{victim}", params={"email": "c@z.com"}, headers=auth_header("b@y.com"))

    assert res.json()["deletedCount"] == 1
    assert identity_provider.deleted == ["c@z.com"]


def test_malformed_id_is_validation_error(client):
    res = client.patch("/users/admin/not-an-id")
    assert res.status_code == 400


def test_menu_writes_require_admin(client, auth_header):
    item = {"name": "Soup", "category": "soup", "price": 9.5, "recipe": "hot"}
    register(client, "c@z.com")
    assert client.post("/menu", json=item).status_code == 401
    assert client.post("/menu", json=item, headers=auth_header("c@z.com")).status_code == 403

    promote(client, "b@y.com")
    item_id = client.post("/menu", json=item, headers=auth_header("b@y.com")).json()["insertedId"]
    client.patch(f"/menu/{item_id}", json={"price": 11.0}, headers=auth_header("b@y.com"))

    fetched = client.get(f"/menu/{item_id}").json()
    assert fetched["price"] == 11.0
    assert fetched["recipe"] == "hot"
    assert len(client.get("/menu").json()) == 1

    client.delete(f"/menu/{item_id}", headers=auth_header("b@y.com"))
    assert client.get(f"/menu/{item_id}").json() is None


def test_reviews_take_identity_from_token(client, auth_header):
    review = {"name": "Ann", "details": "great", "rating": 5}
    assert client.post("/reviews", json=review).status_code == 401
    client.post("/reviews", json=review, headers=auth_header("a@x.com"))
    assert client.get("/reviews").json()[0]["email"] == "a@x.com"


def test_payment_intent(client, payment_gateway):
    res = client.post("/create-payment-intent", json={"price": 19.99})
    assert res.json() == {"clientSecret": "pi_1999_secret"}
    assert client.post("/create-payment-intent", json={"price": 0}).status_code == 400


def test_payment_clears_paid_cart_lines(client, auth_header, mailer):
    line = {"menuId": "m1", "email": "a@x.com", "name": "Soup", "price": 9.5}
    paid = client.post("/carts", json=line).json()["insertedId"]
    kept = client.post("/carts", json=line).json()["insertedId"]

    res = client.post("/payments", json={
        "email": "a@x.com", "price": 9.5, "transactionId": "tx-1", "cartIds": [paid],
    })

    assert res.json()["deletedResult"] == {"deletedCount": 1}
    remaining = client.get("/carts", params={"email": "a@x.com"}).json()
    assert [c["_id"] for c in remaining] == [kept]
    assert mailer.sent[-1]["to"] == "a@x.com"
    history = client.get("/payments/a@x.com", headers=auth_header("a@x.com")).json()
    assert history[0]["cartCleanup"] == "done"


def test_payment_history_is_self_only(client, auth_header):
    res = client.get("/payments/a@x.com", headers=auth_header("c@z.com"))
    assert res.status_code == 403
    assert client.get("/payments/reservation/a@x.com", headers=auth_header("c@z.com")).status_code == 403


def test_reservations_and_stats(client, auth_header):
    client.post("/payments", json={"email": "a@x.com", "price": 10, "transactionId": "t1"})
    client.post("/payments", json={"email": "a@x.com", "price": 25, "transactionId": "t2", "type": "reservation"})
    client.post("/payments", json={"email": "c@z.com", "price": 5, "transactionId": "t3"})

    reservations = client.get("/payments/reservation/a@x.com", headers=auth_header("a@x.com")).json()
    assert [p["transactionId"] for p in reservations] == ["t2"]

    stats = client.get("/user-stats/a@x.com", headers=auth_header("a@x.com")).json()
    assert stats == {"carts": 0, "payments": 2, "reservations": 1, "reviews": 0, "spent": 35}

    promote(client, "b@y.com")
    admin = client.get("/admin-stats", headers=auth_header("b@y.com")).json()
    assert admin == {"users": 1, "menuItems": 0, "orders": 3, "revenue": 40}


def test_forged_role_claim_does_not_grant_admin(client, settings):
    register(client, "c@z.com")
    token = create_access_token({"email": "c@z.com", "role": "admin", "admin": True}, settings=settings)
    headers = {"Authorization": f"Bearer {token}"}

    assert client.get("/users", headers=headers).status_code == 403
    assert client.get("/admin-stats", headers=headers).status_code == 403


def test_path_emails_match_normalized_identity(client, auth_header):
    register(client, "a@X.com")

    status = client.get("/checkValid/a@X.com").json()
    assert status["email"] == "a@x.com"
    assert client.get("/payments/a@X.com", headers=auth_header("a@x.com")).status_code == 200
    assert client.get("/users/admin/a@X.com", headers=auth_header("a@x.com")).json() == {"admin": False}


class DownCollection:
    async def find_one(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("No servers found yet")

    async def create_index(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("No servers found yet")


class DownDatabase:
    def __getitem__(self, name):
        return DownCollection()


def test_database_outage_is_upstream_failure(settings, mailer, identity_provider, payment_gateway):
    app = create_app(
        settings,
        database=DownDatabase(),
        mailer=mailer,
        identity_provider=identity_provider,
        payment_gateway=payment_gateway,
    )
    with TestClient(app) as client:
        res = client.get("/checkValid/a@x.com")

    assert res.status_code == 502
    assert res.json() == {"message": "database unavailable"}
