def user_payload(national_id="11111-111111-1", **overrides):
    digits = national_id.replace("-", "")
    data = {
        "name": "Test Voter",
        "age": 30,
        "email": f"voter{digits}@mail.com",
        "mobile": digits[-10:],
        "address": "123 Test Street",
        "nationalId": national_id,
        "password": "voter123",
        "role": "voter",
    }
    data.update(overrides)
    return data


def signup(client, **kwargs):
    r = client.post("/api/users/signup", json=user_payload(**kwargs))
    assert r.status_code == 200, r.text
    return r.json()


def auth(token):
    return {"Authorization": f"Bearer {token}"}
