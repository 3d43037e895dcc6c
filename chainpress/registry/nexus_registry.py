"""Registry backend for a Nexus node's asset API."""

import json
import logging
from typing import Optional, Dict, Any, List

import requests

from chainpress.errors import RegistryError, MalformedChain
from chainpress.models.record import (
    ContentRecord,
    RecordKind,
    KIND_FIELD,
    STATUS_FIELD,
    STATUS_OFFICIAL,
)
from chainpress.registry.base import Registry
from chainpress.size_policy import ROOT_TEXT_MAX, CHUNK_TEXT_MAX, MAX_POST_CHARS

logger = logging.getLogger(__name__)

CREATE_ENDPOINT = "assets/create/asset"
GET_ENDPOINT = "register/get/assets:asset"
LIST_ENDPOINT = "register/list/assets:asset"

# Per-field maxlength declared when an asset is created.
FIELD_MAXLENGTH = {
    KIND_FIELD: 32,
    STATUS_FIELD: 16,
    "next": 64,
    "title": 64,
    "abstract": 200,
    "cw": 64,
    "reply-to": 64,
    "quote": 64,
    "repost": 64,
    "tags": 128,
    "lang": 2,
    "tip-account": 128,
}
TEXT_MAXLENGTH = {
    RecordKind.ROOT: ROOT_TEXT_MAX,
    RecordKind.CHUNK: CHUNK_TEXT_MAX,
    RecordKind.STANDALONE: MAX_POST_CHARS,
}
DEFAULT_MAXLENGTH = 64
MUTABLE_FIELDS = {STATUS_FIELD, "tip-account"}
# API error code for an address that holds no object.
OBJECT_NOT_FOUND = -13


class NexusRegistry(Registry):
    """Stores content records as Nexus JSON assets over the node's HTTP API."""

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        session_id: Optional[str] = None,
        pin: Optional[str] = None,
        timeout: float = 30.0,
        http: Optional[requests.Session] = None,
    ):
        """
        Initialize the Nexus registry client.

        Args:
            base_url: Node API URL (default: http://localhost:8080)
            session_id: Login session, required by multi-user nodes
            pin: PIN authorising asset creation
            timeout: Per-request timeout in seconds
            http: Optional requests.Session to reuse
        """
        self.base_url = base_url.rstrip("/")
        self.session_id = session_id
        self.pin = pin
        self.timeout = timeout
        self.http = http or requests.Session()

    def close(self) -> None:
        self.http.close()

    @staticmethod
    def build_asset_fields(record: ContentRecord) -> List[Dict[str, Any]]:
        """Field definitions for the JSON asset format, in the record's field order."""
        definitions = []
        for name, value in record.to_fields().items():
            if name == "text":
                maxlength = TEXT_MAXLENGTH[record.kind]
            else:
                maxlength = FIELD_MAXLENGTH.get(name, DEFAULT_MAXLENGTH)
            definitions.append({
                "name": name,
                "type": "string",
                "value": "" if value is None else str(value),
                "mutable": name in MUTABLE_FIELDS,
                "maxlength": maxlength,
            })
        return definitions

    def _call(self, endpoint: str, params: Dict[str, Any], authorised: bool = False) -> Any:
        """POST to an API endpoint and return its ``result`` payload."""
        payload = dict(params)
        if self.session_id:
            payload["session"] = self.session_id
        if authorised and self.pin:
            payload["pin"] = self.pin
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.http.post(url, json=payload, timeout=self.timeout)
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Nexus call %s failed: %s", endpoint, e)
            raise RegistryError(f"Nexus call {endpoint} failed: {e}", {"endpoint": endpoint}) from e

        error = body.get("error") if isinstance(body, dict) else None
        if error or not response.ok:
            message = (error or {}).get("message") or f"HTTP {response.status_code}"
            level = logging.DEBUG if (error or {}).get("code") == OBJECT_NOT_FOUND else logging.ERROR
            logger.log(level, "Nexus call %s returned an error: %s", endpoint, message)
            raise RegistryError(
                f"Nexus call {endpoint} returned an error: {message}",
                {"endpoint": endpoint, "code": (error or {}).get("code")},
            )
        return body.get("result") if isinstance(body, dict) else None

    def create(self, record: ContentRecord) -> str:
        result = self._call(
            CREATE_ENDPOINT,
            {"format": "JSON", "json": json.dumps(self.build_asset_fields(record))},
            authorised=True,
        )
        address = (result or {}).get("address")
        if not address:
            raise RegistryError("Nexus create returned no address", {"endpoint": CREATE_ENDPOINT})
        logger.debug("Created %s asset %s (txid %s)", record.kind.name, address, result.get("txid"))
        return address

    def get(self, address: str) -> Optional[ContentRecord]:
        try:
            result = self._call(GET_ENDPOINT, {"address": address})
        except RegistryError as e:
            if e.details.get("code") == OBJECT_NOT_FOUND:
                return None
            raise
        if not result:
            return None
        return ContentRecord.from_fields(result, address=address)

    def list_records(self, kind: Optional[RecordKind] = None) -> List[ContentRecord]:
        where = f"results.{STATUS_FIELD}={STATUS_OFFICIAL}"
        if kind is not None:
            where = f"results.{KIND_FIELD}={kind.value} AND {where}"
        result = self._call(LIST_ENDPOINT, {"where": where})
        records = []
        for item in result or []:
            try:
                record = ContentRecord.from_fields(item)
            except MalformedChain as e:
                logger.warning("Skipping malformed asset in listing: %s", e)
                continue
            if kind is None or record.kind == kind:
                records.append(record)
        return records
