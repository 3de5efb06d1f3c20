from pydantic import JsonValue

# Schema-free document body as supplied by callers, without `_id`
Fields = dict[str, JsonValue]
