import pytest
from pymongo.errors import DuplicateKeyError

from evoting.storage.users import EMAIL_EXISTS_MESSAGE, MOBILE_EXISTS_MESSAGE, _duplicate_field

from .helpers import auth, signup, user_payload


def test_signup_returns_user_and_token(client):
    body = signup(client)
    assert body["user"]["nationalId"] == "111111111111"
    assert body["user"]["hasVoted"] is False
    assert body["user"]["role"] == "voter"
    assert "password" not in body["user"]

    r = client.get("/api/users/profile", headers=auth(body["token"]))
    assert r.status_code == 200
    assert r.json()["user"]["id"] == body["user"]["id"]


def test_distinct_signups_each_get_their_own_token(client, tokens):
    ids = ["111111111111", "22222-2222222-2", "3333333333333"]
    for national_id in ids:
        body = signup(client, national_id=national_id)
        assert tokens.verify(body["token"]) == body["user"]["id"]


@pytest.mark.parametrize("national_id", ["12345", "abcdefghijklm", "1111-1111111-1", "11111111111111"])
def test_signup_rejects_bad_national_id(client, national_id):
    r = client.post("/api/users/signup", json=user_payload(national_id=national_id))
    assert r.status_code == 400


def test_signup_rejects_bad_email_and_underage(client):
    r = client.post("/api/users/signup", json=user_payload(email="not-an-email"))
    assert r.status_code == 400
    r = client.post("/api/users/signup", json=user_payload(age=17))
    assert r.status_code == 400


def test_signup_rejects_duplicate_national_id(client):
    signup(client, national_id="11111-111111-1")
    # same digits, different grouping
    r = client.post("/api/users/signup", json=user_payload(national_id="111111111111", email="other@mail.com"))
    assert r.status_code == 400
    assert "national ID" in r.json()["detail"]


def test_second_admin_is_rejected(client):
    signup(client, national_id="999999999999", role="admin")
    r = client.post("/api/users/signup", json=user_payload(national_id="888888888888", role="admin"))
    assert r.status_code == 400
    assert r.json()["detail"] == "Admin user already exists"


def test_unknown_role_is_rejected(client):
    r = client.post("/api/users/signup", json=user_payload(role="superuser"))
    assert r.status_code == 400


def test_login_issues_token(client, tokens):
    user = signup(client)["user"]
    r = client.post("/api/users/login", json={"nationalId": "11111-111111-1", "password": "voter123"})
    assert r.status_code == 200
    assert tokens.verify(r.json()["token"]) == user["id"]


def test_login_requires_both_fields(client):
    r = client.post("/api/users/login", json={"nationalId": "111111111111"})
    assert r.status_code == 400
    r = client.post("/api/users/login", json={})
    assert r.status_code == 400


def test_login_failures_look_identical(client):
    signup(client)
    wrong_password = client.post("/api/users/login", json={"nationalId": "111111111111", "password": "nope123"})
    unknown_user = client.post("/api/users/login", json={"nationalId": "555555555555", "password": "voter123"})
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_profile_requires_token(client):
    assert client.get("/api/users/profile").status_code == 401
    r = client.get("/api/users/profile", headers=auth("garbage"))
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"


def test_change_password(client):
    token = signup(client)["token"]
    url = "/api/users/profile/password"

    r = client.put(url, json={"currentPassword": "voter123"}, headers=auth(token))
    assert r.status_code == 400
    r = client.put(url, json={"currentPassword": "wrong!!", "newPassword": "fresh123"}, headers=auth(token))
    assert r.status_code == 401
    r = client.put(url, json={"currentPassword": "voter123", "newPassword": "fresh123"}, headers=auth(token))
    assert r.status_code == 200

    old = client.post("/api/users/login", json={"nationalId": "111111111111", "password": "voter123"})
    new = client.post("/api/users/login", json={"nationalId": "111111111111", "password": "fresh123"})
    assert old.status_code == 401
    assert new.status_code == 200



def test_duplicate_email_is_reported_as_email(client):
    signup(client, national_id="111111111111", email="carole@mail.com")
    r = client.post(
        "/api/users/signup", json=user_payload(national_id="222222222222", email="carole@mail.com")
    )
    assert r.status_code == 400
    assert r.json()["detail"] == EMAIL_EXISTS_MESSAGE


def test_duplicate_mobile_is_rejected(client):
    signup(client, national_id="111111111111", mobile="5550001111")
    r = client.post("/api/users/signup", json=user_payload(national_id="222222222222", mobile="5550001111"))
    assert r.status_code == 400
    assert r.json()["detail"] == MOBILE_EXISTS_MESSAGE


@pytest.mark.parametrize(
    "details, expected",
    [
        ({"keyPattern": {"email": 1}, "keyValue": {"email": "carole@mail.com"}}, "email"),
        ({"keyPattern": {"role": 1}, "keyValue": {"role": "admin"}}, "role"),
        ({"keyPattern": {"nationalId": 1}, "keyValue": {"nationalId": "111111111111"}}, "nationalId"),
        (
            {"errmsg": 'E11000 duplicate key error collection: voting_db.users index: email_1 dup key: '
                       '{ email: "carole@mail.com" }'},
            "email",
        ),
        (None, None),
    ],
)
def test_duplicate_field_comes_from_key_pattern(details, expected):
    err = DuplicateKeyError(
        'E11000 duplicate key error dup key: { email: "carole@mail.com" }', 11000, details
    )
    assert _duplicate_field(err) == expected
