import json
from unittest.mock import MagicMock

import pytest
import requests

from signaldesk.exceptions import BackendError
from signaldesk.schemas import SignalType, UserRole, UserStatus
from signaldesk.services.firebase_client import (
    FirebaseBackendClient,
    decode_fields,
    encode_fields,
    encode_value,
)

DOCS = "https://firestore.googleapis.com/v1/projects/demo-project/databases/(default)/documents"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload) if payload is not None else ""
        self.content = self.text.encode()

    def json(self):
        return self._payload


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return FirebaseBackendClient(api_key="AIzaTest", project_id="demo-project", session=session)


def _user_doc(uid, **fields):
    return {"name": f"{DOCS}/users/{uid}", "fields": encode_fields(fields)}


def test_codec():
    data = {
        "name": "Ana",
        "followers": 12,
        "win_rate": 71.5,
        "active": True,
        "nothing": None,
        "tags": ["a", "b"],
        "provider": {"name": "P", "winRate": 70.0},
    }
    encoded = encode_fields(data)
    assert encoded["followers"] == {"integerValue": "12"}
    assert encoded["active"] == {"booleanValue": True}
    assert encoded["provider"]["mapValue"]["fields"]["name"] == {"stringValue": "P"}
    assert decode_fields(encoded) == data


def test_encode_bool_before_int():
    assert encode_value(False) == {"booleanValue": False}


def test_sign_in_loads_profile(client, session):
    session.request.side_effect = [
        FakeResponse(payload={"localId": "uid-1", "idToken": "tok", "email": "ana@example.com"}),
        FakeResponse(payload=_user_doc("uid-1", name="Ana", role="premium", plan="Premium")),
    ]

    user = client.sign_in("ana@example.com", "pw")

    assert user.id == "uid-1"
    assert user.name == "Ana"
    assert user.email == "ana@example.com"
    assert user.role is UserRole.PREMIUM

    sign_in_call, profile_call = session.request.call_args_list
    assert sign_in_call.args == ("POST", "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword")
    assert sign_in_call.kwargs["params"] == {"key": "AIzaTest"}
    assert profile_call.args == ("GET", f"{DOCS}/users/uid-1")
    assert profile_call.kwargs["headers"]["Authorization"] == "Bearer tok"


def test_sign_in_without_profile_returns_none(client, session):
    session.request.side_effect = [
        FakeResponse(payload={"localId": "uid-1", "idToken": "tok"}),
        FakeResponse(status_code=404, payload={"error": {"status": "NOT_FOUND"}}),
    ]
    assert client.sign_in("ana@example.com", "pw") is None


def test_bad_credentials_raise(client, session):
    session.request.return_value = FakeResponse(400, {"error": {"message": "INVALID_PASSWORD"}})
    with pytest.raises(BackendError) as excinfo:
        client.sign_in("ana@example.com", "wrong")
    assert excinfo.value.status_code == 400


def test_sign_in_token_not_reused_by_later_calls(client, session):
    session.request.side_effect = [
        FakeResponse(payload={"localId": "uid-a", "idToken": "token-of-a"}),
        FakeResponse(payload=_user_doc("uid-a", name="A")),
        FakeResponse(400, {"error": {"message": "INVALID_PASSWORD"}}),
        FakeResponse(payload={"documents": [_user_doc("u1", name="A")]}),
    ]

    client.sign_in("a@example.com", "pw")
    with pytest.raises(BackendError):
        client.sign_in("b@example.com", "wrong")
    client.fetch_users()

    failed_sign_in, list_call = session.request.call_args_list[2:]
    assert "Authorization" not in failed_sign_in.kwargs["headers"]
    assert "Authorization" not in list_call.kwargs["headers"]


def test_sign_up_profile_write_uses_new_token(client, session):
    session.request.side_effect = [
        FakeResponse(payload={"localId": "uid-2", "idToken": "tok-2"}),
        FakeResponse(payload={}),
        FakeResponse(payload={}),
    ]

    client.sign_up("new@example.com", "pw", "New")
    client.update_user_status("uid-2", UserStatus.SUSPENDED)

    _, write_call, update_call = session.request.call_args_list
    assert write_call.kwargs["headers"]["Authorization"] == "Bearer tok-2"
    assert "Authorization" not in update_call.kwargs["headers"]


def test_network_error_raises(client, session):
    session.request.side_effect = requests.ConnectionError("offline")
    with pytest.raises(BackendError):
        client.fetch_providers()


def test_sign_up_writes_profile(client, session):
    session.request.side_effect = [
        FakeResponse(payload={"localId": "uid-2", "idToken": "tok"}),
        FakeResponse(payload={}),
    ]

    user = client.sign_up("new@example.com", "pw", "New")

    assert user.id == "uid-2"
    assert user.plan == "Gratuito"
    write_call = session.request.call_args_list[1]
    assert write_call.args == ("PATCH", f"{DOCS}/users/uid-2")
    fields = decode_fields(write_call.kwargs["json"]["fields"])
    assert fields["role"] == "free"
    assert fields["status"] == "Ativo"
    assert "created_at" in fields


def test_password_reset(client, session):
    session.request.return_value = FakeResponse(payload={"email": "ana@example.com"})
    client.send_password_reset("ana@example.com")
    call = session.request.call_args
    assert call.args[1].endswith("accounts:sendOobCode")
    assert call.kwargs["json"] == {"requestType": "PASSWORD_RESET", "email": "ana@example.com"}


def test_fetch_signals(client, session):
    signal_doc = {
        "name": f"{DOCS}/signals/s1",
        "fields": encode_fields(
            {
                "provider": {"name": "CryptoMaster", "avatarUrl": "http://a", "winRate": 78.5},
                "pair": "BTC/USDT",
                "type": "Compra",
                "timeframe": "4H",
                "entry": 100.0,
                "target": 110.0,
                "stop": 95.0,
                "justification": "breakout",
                "timestamp": "2024-05-20T10:00:00Z",
            }
        ),
    }
    session.request.side_effect = [
        FakeResponse(payload=[{"document": signal_doc, "readTime": "x"}, {"readTime": "x"}]),
        FakeResponse(payload=[{"result": {"aggregateFields": {"total": {"integerValue": "31"}}}}]),
    ]

    signals, total = client.fetch_signals(offset=10, limit=10)

    assert total == 31
    assert len(signals) == 1
    signal = signals[0]
    assert signal.id == "s1"
    assert signal.type is SignalType.BUY
    assert signal.provider.name == "CryptoMaster"
    assert signal.provider.win_rate == 78.5
    assert signal.timestamp == "20/05/2024"

    query = session.request.call_args_list[0].kwargs["json"]["structuredQuery"]
    assert query["offset"] == 10
    assert query["limit"] == 10
    assert query["orderBy"][0]["direction"] == "DESCENDING"


def test_fetch_users_follows_pages(client, session):
    session.request.side_effect = [
        FakeResponse(payload={"documents": [_user_doc("u1", name="A", email="a@x")], "nextPageToken": "p2"}),
        FakeResponse(payload={"documents": [_user_doc("u2", status="Suspenso", created_at="2024-03-01T00:00:00Z")]}),
    ]

    users = client.fetch_users()

    assert [u.id for u in users] == ["u1", "u2"]
    assert users[0].status is UserStatus.ACTIVE
    assert users[1].name == "No Name"
    assert users[1].status is UserStatus.SUSPENDED
    assert users[1].join_date.isoformat() == "2024-03-01"
    assert session.request.call_args_list[1].kwargs["params"]["pageToken"] == "p2"


def test_update_status_uses_mask(client, session):
    session.request.return_value = FakeResponse(payload={})
    client.update_user_status("u1", UserStatus.SUSPENDED)
    call = session.request.call_args
    assert call.args == ("PATCH", f"{DOCS}/users/u1")
    assert call.kwargs["params"]["updateMask.fieldPaths"] == ["status"]
    assert decode_fields(call.kwargs["json"]["fields"]) == {"status": "Suspenso"}


def test_delete_user(client, session):
    session.request.return_value = FakeResponse(payload={})
    client.delete_user("u1", remove_identity=True)
    session.request.assert_called_once()
    assert session.request.call_args.args == ("DELETE", f"{DOCS}/users/u1")
