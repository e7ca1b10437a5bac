"""netsuite-tba target class."""

from target_hotglue.target import TargetHotglue
from singer_sdk import typing as th

from target_netsuite_tba.sinks import SINK_TYPES, sink_class_for_stream

SECRET_SETTINGS = ("ns_consumer_secret", "ns_token_secret")


def mark_secrets(schema: dict) -> dict:
    for key in SECRET_SETTINGS:
        schema["properties"][key]["secret"] = True
    return schema


class TargetNetsuiteTBA(TargetHotglue):
    """Singer target calling NetSuite RESTlets and REST APIs with TBA."""

    name = "target-netsuite-tba"
    config_jsonschema = mark_secrets(
        th.PropertiesList(
            th.Property("ns_account", th.StringType, required=True, description="NetSuite account id, e.g. 1234567_SB1"),
            th.Property("ns_realm", th.StringType, description="OAuth realm; defaults to ns_account. Hyphens become underscores."),
            th.Property("ns_consumer_key", th.StringType, required=True),
            th.Property("ns_consumer_secret", th.StringType, required=True),
            th.Property("ns_token_key", th.StringType, required=True),
            th.Property("ns_token_secret", th.StringType, required=True),
            th.Property("ns_script_id", th.StringType, description="RESTlet script id, needed by the Restlet streams"),
            th.Property("ns_deploy_id", th.StringType, description="RESTlet deployment id, needed by the Restlet streams"),
            th.Property("continue_on_failure", th.BooleanType, default=False),
            th.Property("request_timeout", th.IntegerType, default=60),
        ).to_dict()
    )

    SINK_TYPES = SINK_TYPES

    def get_sink_class(self, stream_name: str):
        return sink_class_for_stream(stream_name)


if __name__ == "__main__":
    TargetNetsuiteTBA.cli()
