"""NetSuite TBA target sink classes, which handle writing streams."""

from singer_sdk.sinks import BatchSink
from target_hotglue.client import HotglueBaseSink

from target_netsuite_tba.client import DEFAULT_TIMEOUT, FailurePolicy, ItemResult, NetSuiteTBAClient
from target_netsuite_tba.credentials import NetSuiteCredential, RestletDeployment
from target_netsuite_tba.operations import (
    rest_operation_from_item,
    restlet_operation_from_item,
    restlet_post_from_item,
)


class NetSuiteBaseSink(HotglueBaseSink, BatchSink):
    """Collects one batch of workflow items and sends them item by item."""

    endpoint = ""
    aliases = ()
    needs_deployment = False

    @property
    def credential(self) -> NetSuiteCredential:
        return NetSuiteCredential.from_config(self.config)

    @property
    def policy(self) -> FailurePolicy:
        return FailurePolicy.from_flag(self.config.get("continue_on_failure", False))

    def get_client(self) -> NetSuiteTBAClient:
        deployment = RestletDeployment.from_config(self.config) if self.needs_deployment else None
        return NetSuiteTBAClient(
            self.credential,
            deployment=deployment,
            timeout=self.config.get("request_timeout") or DEFAULT_TIMEOUT,
        )

    def parse_item(self, item: dict, index: int):
        raise NotImplementedError

    def start_batch(self, context: dict) -> None:
        """Start a batch."""
        context["records"] = []

    def preprocess_record(self, record: dict, context: dict) -> dict:
        return record

    def process_record(self, record: dict, context: dict) -> None:
        """Queue the record; items are sent when the batch is drained."""
        if not record:
            self.logger.info(f"Record is empty for {self.stream_name}")
            return
        context.setdefault("records", []).append(record)

    def process_batch(self, context: dict) -> None:
        """Send every queued item and record the outcome in the state."""
        items = context.get("records", [])
        if not items:
            return
        if not self.latest_state:
            self.init_state()

        self.logger.info(f"Sending {len(items)} item(s) for stream {self.stream_name}")
        results = self.get_client().run_batch(items, self.parse_item, self.policy)
        for result in results:
            self.record_result(result)
        context["results"] = [result.as_dict() for result in results]

    def record_result(self, result: ItemResult) -> None:
        state = {"success": result.ok}
        if result.ok:
            record_id = result.data.get("id") if isinstance(result.data, dict) else None
            if record_id:
                state["id"] = str(record_id)
            self.logger.info(f"{self.stream_name} processed item {result.index}")
        else:
            state["error"] = result.error
            self.logger.error(f"{self.stream_name} item {result.index} failed: {result.error}")
        self.update_state(state)


class RestApiSink(NetSuiteBaseSink):
    """REST Record API and SuiteQL operations."""

    name = "RestApi"
    aliases = ("rest", "records", "suiteql")

    def parse_item(self, item: dict, index: int):
        return rest_operation_from_item(item, index)


class RestletSink(NetSuiteBaseSink):
    """Generic RESTlet calls (GET, POST, PUT, DELETE)."""

    name = "Restlet"
    aliases = ("restlets",)
    needs_deployment = True

    def parse_item(self, item: dict, index: int):
        return restlet_operation_from_item(item, index)


class RestletPluginSink(RestletSink):
    """RESTlet calls that always POST a JSON request body."""

    name = "RestletPlugin"
    aliases = ("restlet_plugin", "restletpost")

    def parse_item(self, item: dict, index: int):
        return restlet_post_from_item(item, index)


SINK_TYPES = [RestApiSink, RestletSink, RestletPluginSink]


def sink_class_for_stream(stream_name: str):
    stream = stream_name.lower()
    for sink_class in SINK_TYPES:
        if stream == sink_class.name.lower() or stream in sink_class.aliases:
            return sink_class
    raise ValueError(f"Unsupported stream '{stream_name}', expected one of: {', '.join(s.name for s in SINK_TYPES)}")
