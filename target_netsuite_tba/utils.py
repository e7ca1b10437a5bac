import json

from target_netsuite_tba.exceptions import MalformedInputError


def parse_json_field(value, field, label, item_index=None, default=None):
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(
                f"Invalid JSON in {label}: {exc}", field=field, item_index=item_index
            ) from exc
    raise MalformedInputError(
        f"Invalid JSON in {label}: expected text or an object, got {type(value).__name__}",
        field=field,
        item_index=item_index,
    )


def extract_id_from_location(headers):
    location = headers.get("Location")
    if not location:
        return None
    return location.rstrip("/").split("/")[-1]
