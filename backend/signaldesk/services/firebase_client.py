from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from ..exceptions import BackendError
from ..schemas import AdminUser, Signal, SignalProvider, User, UserStatus
from .backend_client import (
    BackendClient,
    admin_user_from_row,
    provider_from_row,
    signal_from_row,
    user_from_row,
)

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
FIRESTORE_URL = "https://firestore.googleapis.com/v1"

USERS_COLLECTION = "users"
SIGNALS_COLLECTION = "signals"
PROVIDERS_COLLECTION = "providers"


# --- Firestore typed-value codec ---


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a Python value into a Firestore REST `Value`."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        # Firestore transports int64 as a string.
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return {"timestampValue": value.isoformat()}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    return {"stringValue": str(value)}


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {key: encode_value(val) for key, val in data.items()}


def decode_value(value: dict[str, Any]) -> Any:
    """Decode a Firestore REST `Value` into a plain Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "stringValue" in value:
        return value["stringValue"]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    # referenceValue, geoPointValue, bytesValue: pass through untouched
    return next(iter(value.values()), None)


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(val) for key, val in fields.items()}


def document_id(document: dict[str, Any]) -> str:
    """Documents are addressed by their full resource name; the id is the last segment."""
    return document["name"].rsplit("/", 1)[-1]


class FirebaseBackendClient(BackendClient):
    """
    Backend implementation talking to Firebase over its public REST APIs.

    - Authentication: Identity Toolkit (`accounts:*`) with the web API key.
    - Data: Firestore REST. The client is shared by every request, so it holds
      no user credentials: only the profile read and write done during sign-in
      and sign-up carry the id token that call just returned.

    Deleting the auth identity of another user is only possible with the
    Admin SDK, which a web API key cannot reach.
    """

    name = "firebase"

    def __init__(
        self,
        api_key: str,
        project_id: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.project_id = project_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.documents_url = f"{FIRESTORE_URL}/projects/{project_id}/databases/(default)/documents"

    # --- low level HTTP ---

    def _headers(self, id_token: Optional[str] = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if id_token:
            headers["Authorization"] = f"Bearer {id_token}"
        return headers

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        id_token: Optional[str] = None,
    ) -> Any:
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(id_token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BackendError(f"Firebase request failed: {e}", context={"url": url}) from e

        logger.debug("[FirebaseBackendClient] %s %s status=%s", method, url, resp.status_code)
        if resp.status_code == 404 and method == "GET":
            return None
        if resp.status_code >= 400:
            raise BackendError(
                f"Firebase returned {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                context={"url": url},
            )
        return resp.json() if resp.content else {}

    def _identity(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{IDENTITY_TOOLKIT_URL}/accounts:{endpoint}"
        return self._request("POST", url, params={"key": self.api_key}, json=payload)

    def _get_document(
        self, collection: str, doc_id: str, id_token: Optional[str] = None
    ) -> Optional[dict[str, Any]]:
        doc = self._request("GET", f"{self.documents_url}/{collection}/{doc_id}", id_token=id_token)
        if doc is None:
            return None
        return decode_fields(doc.get("fields", {}))

    def _set_document(
        self, collection: str, doc_id: str, data: dict[str, Any], id_token: Optional[str] = None
    ) -> None:
        self._request(
            "PATCH",
            f"{self.documents_url}/{collection}/{doc_id}",
            json={"fields": encode_fields(data)},
            id_token=id_token,
        )

    def _update_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        # The update mask restricts the write to the given fields; currentDocument
        # makes it fail instead of creating a missing document.
        params = {"updateMask.fieldPaths": list(data.keys()), "currentDocument.exists": "true"}
        self._request(
            "PATCH",
            f"{self.documents_url}/{collection}/{doc_id}",
            params=params,
            json={"fields": encode_fields(data)},
        )

    def _list_documents(self, collection: str) -> list[dict[str, Any]]:
        documents: list[dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            params: dict[str, Any] = {"pageSize": 300}
            if page_token:
                params["pageToken"] = page_token
            data = self._request("GET", f"{self.documents_url}/{collection}", params=params) or {}
            documents.extend(data.get("documents", []))
            page_token = data.get("nextPageToken")
            if not page_token:
                return documents

    def _run_query(self, structured_query: dict[str, Any]) -> list[dict[str, Any]]:
        rows = self._request("POST", f"{self.documents_url}:runQuery", json={"structuredQuery": structured_query})
        # runQuery streams one entry per document, plus entries without a
        # document (e.g. read time only).
        return [row["document"] for row in rows or [] if "document" in row]

    def _count(self, collection: str) -> int:
        payload = {
            "structuredAggregationQuery": {
                "structuredQuery": {"from": [{"collectionId": collection}]},
                "aggregations": [{"alias": "total", "count": {}}],
            }
        }
        rows = self._request("POST", f"{self.documents_url}:runAggregationQuery", json=payload) or []
        for row in rows:
            fields = row.get("result", {}).get("aggregateFields", {})
            if "total" in fields:
                return int(decode_value(fields["total"]))
        return 0

    # --- auth ---

    def sign_in(self, email: str, password: str) -> Optional[User]:
        data = self._identity(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        uid = data["localId"]

        profile = self._get_document(USERS_COLLECTION, uid, id_token=data.get("idToken"))
        if profile is None:
            logger.info("[FirebaseBackendClient] no profile document for %s", uid)
            return None
        return user_from_row(uid, profile, email=data.get("email"))

    def sign_up(self, email: str, password: str, name: str) -> User:
        data = self._identity(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        uid = data["localId"]

        profile = {
            "name": name,
            "email": email,
            "role": "free",
            "plan": "Gratuito",
            "status": UserStatus.ACTIVE.value,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._set_document(USERS_COLLECTION, uid, profile, id_token=data.get("idToken"))
        return user_from_row(uid, profile)

    def send_password_reset(self, email: str) -> None:
        self._identity("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    def upgrade_user(self, user_id: str) -> User:
        self._update_document(USERS_COLLECTION, user_id, {"role": "premium", "plan": "Premium"})
        profile = self._get_document(USERS_COLLECTION, user_id) or {}
        return user_from_row(user_id, {**profile, "role": "premium", "plan": "Premium"})

    # --- data ---

    def fetch_signals(self, offset: int, limit: int) -> tuple[list[Signal], int]:
        query = {
            "from": [{"collectionId": SIGNALS_COLLECTION}],
            "orderBy": [{"field": {"fieldPath": "timestamp"}, "direction": "DESCENDING"}],
            "offset": offset,
            "limit": limit,
        }
        documents = self._run_query(query)
        signals = [signal_from_row(document_id(d), decode_fields(d.get("fields", {}))) for d in documents]
        return signals, self._count(SIGNALS_COLLECTION)

    def fetch_providers(self) -> list[SignalProvider]:
        return [
            provider_from_row(document_id(d), decode_fields(d.get("fields", {})))
            for d in self._list_documents(PROVIDERS_COLLECTION)
        ]

    def fetch_users(self) -> list[AdminUser]:
        return [
            admin_user_from_row(document_id(d), decode_fields(d.get("fields", {})))
            for d in self._list_documents(USERS_COLLECTION)
        ]

    # --- admin ---

    def update_user_status(self, user_id: str, status: UserStatus) -> None:
        self._update_document(USERS_COLLECTION, user_id, {"status": status.value})

    def delete_user(self, user_id: str, *, remove_identity: bool = False) -> None:
        self._request("DELETE", f"{self.documents_url}/{USERS_COLLECTION}/{user_id}")
        if remove_identity:
            logger.warning(
                "[FirebaseBackendClient] auth identity of %s kept: deleting other users requires the Admin SDK",
                user_id,
            )
