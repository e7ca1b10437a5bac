"""Map workflow items to NetSuite requests.

Each operation is its own small class carrying exactly the fields it needs,
checked when the object is built. ``to_request`` turns it into a
:class:`RequestDescriptor`; nothing here signs or sends anything.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

from target_netsuite_tba.credentials import NetSuiteCredential, RestletDeployment
from target_netsuite_tba.exceptions import MalformedInputError, UnsupportedOperationError
from target_netsuite_tba.oauth import RequestDescriptor
from target_netsuite_tba.utils import parse_json_field

JSON_HEADERS = {"Content-Type": "application/json"}
REST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Prefer": "transient",
}


def rest_base_url(credential: NetSuiteCredential) -> str:
    return f"https://{credential.account_host}.suitetalk.api.netsuite.com/services/rest"


def restlet_base_url(credential: NetSuiteCredential) -> str:
    return f"https://{credential.account_host}.restlets.api.netsuite.com/app/site/hosting/restlet.nl"


# Attribute name -> item key, for error messages.
ITEM_FIELDS = {
    "record_type": "recordType",
    "record_id": "recordId",
    "data": "recordData",
    "external_id_field": "externalIdField",
    "external_id_value": "externalIdValue",
    "query": "suiteqlQuery",
    "source_record_type": "sourceRecordType",
    "source_record_id": "sourceRecordId",
    "target_record_type": "targetRecordType",
    "method": "operation",
}


def _require(operation, *names):
    for name in names:
        value = getattr(operation, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            item_field = ITEM_FIELDS.get(name, name)
            raise MalformedInputError(
                f"Missing required field '{item_field}' for operation '{operation.name}'",
                field=item_field,
                item_index=operation.item_index,
            )


class Operation:
    name = None
    required = ()

    def __post_init__(self):
        _require(self, *self.required)


class RestOperation(Operation):
    def to_request(self, credential: NetSuiteCredential) -> RequestDescriptor:
        method, path, body = self.route()
        return RequestDescriptor(
            method=method,
            url=f"{rest_base_url(credential)}{path}",
            body=body,
            headers=dict(REST_HEADERS),
        )

    def route(self):
        raise NotImplementedError


@dataclass
class GetRecord(RestOperation):
    record_type: str
    record_id: str
    expand_subresources: bool = False
    fields: Optional[str] = None
    item_index: Optional[int] = None

    name = "get"
    required = ("record_type", "record_id")

    def route(self):
        path = f"/record/v1/{self.record_type}/{self.record_id}"
        query = []
        if self.expand_subresources:
            query.append("expandSubResources=true")
        if self.fields:
            query.append(f"fields={quote(self.fields, safe='')}")
        if query:
            path += "?" + "&".join(query)
        return "GET", path, None


@dataclass
class CreateRecord(RestOperation):
    record_type: str
    data: Any
    item_index: Optional[int] = None

    name = "create"
    required = ("record_type", "data")

    def route(self):
        return "POST", f"/record/v1/{self.record_type}", self.data


@dataclass
class UpdateRecord(RestOperation):
    record_type: str
    record_id: str
    data: Any
    item_index: Optional[int] = None

    name = "update"
    required = ("record_type", "record_id", "data")

    def route(self):
        return "PATCH", f"/record/v1/{self.record_type}/{self.record_id}", self.data


@dataclass
class DeleteRecord(RestOperation):
    record_type: str
    record_id: str
    item_index: Optional[int] = None

    name = "delete"
    required = ("record_type", "record_id")

    def route(self):
        return "DELETE", f"/record/v1/{self.record_type}/{self.record_id}", None


@dataclass
class UpsertRecord(RestOperation):
    record_type: str
    external_id_field: str
    external_id_value: str
    data: Any
    item_index: Optional[int] = None

    name = "upsert"
    required = ("record_type", "external_id_field", "external_id_value", "data")

    def route(self):
        path = f"/record/v1/{self.record_type}/{self.external_id_field}/{self.external_id_value}"
        return "PUT", path, self.data


@dataclass
class SearchRecords(RestOperation):
    query: str
    limit: Optional[int] = None
    offset: Optional[int] = None
    item_index: Optional[int] = None

    name = "search"
    required = ("query",)

    def route(self):
        path = "/query/v1/suiteql"
        # NetSuite only reads paging from the query string, not the body.
        query = []
        if self.limit:
            query.append(f"limit={int(self.limit)}")
        if self.offset:
            query.append(f"offset={int(self.offset)}")
        if query:
            path += "?" + "&".join(query)
        return "POST", path, {"q": self.query}


@dataclass
class TransformRecord(RestOperation):
    source_record_type: str
    source_record_id: str
    target_record_type: str
    data: Any = field(default_factory=dict)
    item_index: Optional[int] = None

    name = "transform"
    required = ("source_record_type", "source_record_id", "target_record_type")

    def route(self):
        path = (
            f"/record/v1/{self.source_record_type}/{self.source_record_id}"
            f"/!transform/{self.target_record_type}"
        )
        return "POST", path, self.data


@dataclass
class RestletCall(Operation):
    """Generic RESTlet call; parameters go to the query for GET/DELETE."""

    method: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    item_index: Optional[int] = None

    name = "restlet"
    required = ("method",)

    def __post_init__(self):
        super().__post_init__()
        self.method = str(self.method).upper()
        if self.method not in ("GET", "POST", "PUT", "DELETE"):
            raise UnsupportedOperationError(
                f"Unknown operation: {self.method.lower()}", field="operation", item_index=self.item_index
            )
        if self.method in ("GET", "DELETE") and not isinstance(self.parameters or {}, dict):
            raise MalformedInputError(
                "Additional Parameters must be a JSON object for GET and DELETE calls",
                field="additionalParameters",
                item_index=self.item_index,
            )

    def to_request(self, credential: NetSuiteCredential, deployment: RestletDeployment) -> RequestDescriptor:
        query = {"script": deployment.script_id, "deploy": deployment.deploy_id}
        body = None
        if self.method in ("GET", "DELETE"):
            for key, value in (self.parameters or {}).items():
                # Repeated values travel as one comma-separated parameter.
                query[key] = ",".join(str(v) for v in value) if isinstance(value, (list, tuple)) else value
        else:
            body = self.parameters or {}
        return RequestDescriptor(
            method=self.method,
            url=f"{restlet_base_url(credential)}?{urlencode(query, quote_via=quote)}",
            body=body,
            headers=dict(JSON_HEADERS),
        )


@dataclass
class RestletPost(Operation):
    body: Any = field(default_factory=dict)
    item_index: Optional[int] = None

    name = "restletPost"

    def to_request(self, credential: NetSuiteCredential, deployment: RestletDeployment) -> RequestDescriptor:
        query = urlencode({"script": deployment.script_id, "deploy": deployment.deploy_id}, quote_via=quote)
        return RequestDescriptor(
            method="POST",
            url=f"{restlet_base_url(credential)}?{query}",
            body=self.body if self.body is not None else {},
            headers=dict(JSON_HEADERS),
        )


def _record_data(item, index):
    return parse_json_field(item.get("recordData"), "recordData", "Record Data", index)


def _get(item, index, options):
    return GetRecord(
        record_type=item.get("recordType"),
        record_id=item.get("recordId"),
        expand_subresources=bool(options.get("expandSubresources")),
        fields=options.get("fields") or None,
        item_index=index,
    )


def _create(item, index, options):
    return CreateRecord(record_type=item.get("recordType"), data=_record_data(item, index), item_index=index)


def _update(item, index, options):
    return UpdateRecord(
        record_type=item.get("recordType"),
        record_id=item.get("recordId"),
        data=_record_data(item, index),
        item_index=index,
    )


def _delete(item, index, options):
    return DeleteRecord(record_type=item.get("recordType"), record_id=item.get("recordId"), item_index=index)


def _upsert(item, index, options):
    return UpsertRecord(
        record_type=item.get("recordType"),
        external_id_field=item.get("externalIdField"),
        external_id_value=item.get("externalIdValue"),
        data=_record_data(item, index),
        item_index=index,
    )


def _search(item, index, options):
    return SearchRecords(
        query=item.get("suiteqlQuery"),
        limit=options.get("limit"),
        offset=options.get("offset"),
        item_index=index,
    )


def _transform(item, index, options):
    data = parse_json_field(item.get("transformData"), "transformData", "Transform Data", index, default={})
    return TransformRecord(
        source_record_type=item.get("sourceRecordType"),
        source_record_id=item.get("sourceRecordId"),
        target_record_type=item.get("targetRecordType"),
        data=data,
        item_index=index,
    )


REST_OPERATIONS = {
    "get": _get,
    "create": _create,
    "update": _update,
    "delete": _delete,
    "upsert": _upsert,
    "search": _search,
    "transform": _transform,
}


def rest_operation_from_item(item: dict, index: Optional[int] = None) -> RestOperation:
    operation = (item.get("operation") or "get").lower()
    builder = REST_OPERATIONS.get(operation)
    if builder is None:
        raise UnsupportedOperationError(f"Unknown operation: {operation}", field="operation", item_index=index)
    options = item.get("additionalOptions") or {}
    return builder(item, index, options)


def restlet_operation_from_item(item: dict, index: Optional[int] = None) -> RestletCall:
    parameters = parse_json_field(
        item.get("additionalParameters"), "additionalParameters", "Additional Parameters", index, default={}
    )
    return RestletCall(method=item.get("operation") or "get", parameters=parameters, item_index=index)


def restlet_post_from_item(item: dict, index: Optional[int] = None) -> RestletPost:
    body = parse_json_field(item.get("requestBody"), "requestBody", "Request Body", index, default={})
    return RestletPost(body=body, item_index=index)
