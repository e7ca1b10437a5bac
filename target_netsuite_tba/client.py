import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

import requests
from target_hotglue.common import HGJSONEncoder

from target_netsuite_tba.credentials import NetSuiteCredential, RestletDeployment
from target_netsuite_tba.exceptions import (
    MissingCredentialError,
    NetSuiteAPIError,
    NetSuiteAuthenticationError,
)
from target_netsuite_tba.oauth import NetSuiteTBAAuth, RequestDescriptor
from target_netsuite_tba.operations import RestOperation
from target_netsuite_tba.utils import extract_id_from_location

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


class FailurePolicy(Enum):
    FAIL_FAST = "fail_fast"
    COLLECT_ERRORS = "collect_errors"

    @classmethod
    def from_flag(cls, continue_on_failure: bool) -> "FailurePolicy":
        return cls.COLLECT_ERRORS if continue_on_failure else cls.FAIL_FAST


@dataclass
class ItemResult:
    index: int
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        payload = self.data if self.ok else {"error": self.error}
        return {"json": payload, "pairedItem": {"item": self.index}}


def get_clean_error_message(response: requests.Response) -> str:
    """Extract clean error message from NetSuite API response."""
    try:
        error_details = response.json().get("o:errorDetails", [])
        if error_details:
            detail = error_details[0].get("detail", "")
            if detail:
                return detail
        return response.text
    except (ValueError, AttributeError, IndexError):
        return response.text


def validate_response(response: requests.Response) -> None:
    if response.status_code < 400:
        return
    message = f"Request to url {response.url} failed with status {response.status_code}: {get_clean_error_message(response)}"
    if response.status_code in (401, 403):
        raise NetSuiteAuthenticationError(message, response)
    raise NetSuiteAPIError(message, response)


class NetSuiteTBAClient:
    """Signs and sends NetSuite requests for one set of credentials."""

    def __init__(
        self,
        credential: NetSuiteCredential,
        deployment: Optional[RestletDeployment] = None,
        session: Optional[requests.Session] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.auth = NetSuiteTBAAuth(credential)
        # The auth hook holds the realm-normalized credential; reuse it for URLs.
        self.credential = self.auth.credential
        self.deployment = deployment
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_request(self, operation) -> RequestDescriptor:
        if isinstance(operation, RestOperation):
            return operation.to_request(self.credential)
        # RESTlet calls need a script and deployment, checked here only.
        if self.deployment is None:
            raise MissingCredentialError(["ns_script_id", "ns_deploy_id"])
        return operation.to_request(self.credential, self.deployment)

    def send(self, request: RequestDescriptor) -> Any:
        data = json.dumps(request.body, cls=HGJSONEncoder) if request.body is not None else None
        prepared = self.session.prepare_request(
            requests.Request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                data=data,
                auth=self.auth,
            )
        )
        logger.info("%s %s", request.method, request.url)
        response = self.session.send(prepared, timeout=self.timeout)
        logger.info("%s %s -> %s", request.method, request.url, response.status_code)

        validate_response(response)
        return self.parse_response(response)

    def parse_response(self, response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            result = {"success": True}
            record_id = extract_id_from_location(response.headers)
            if record_id:
                result["id"] = record_id
            return result
        try:
            return response.json()
        except ValueError:
            return {"success": True, "body": response.text}

    def execute(self, operation) -> Any:
        return self.send(self.build_request(operation))

    def run_batch(
        self,
        items: Iterable[dict],
        parse_item: Callable[[dict, int], Any],
        policy: FailurePolicy = FailurePolicy.FAIL_FAST,
    ) -> List[ItemResult]:
        """Run every item independently and gather one result per item.

        With ``FAIL_FAST`` the first failure is raised and the batch stops.
        With ``COLLECT_ERRORS`` the failure message is stored against the
        item and the next item runs.
        """
        results = []
        for index, item in enumerate(items):
            try:
                operation = parse_item(item, index)
                results.append(ItemResult(index=index, data=self.execute(operation)))
            except Exception as exc:
                if policy is FailurePolicy.FAIL_FAST:
                    raise
                logger.warning("Item %s failed: %s", index, exc)
                results.append(ItemResult(index=index, error=str(exc)))
        return results
