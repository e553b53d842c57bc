from flask import request
from pydantic.alias_generators import to_camel


def parse_body(schema):
    """Validate the JSON body against a Pydantic schema (raises ValidationError)."""
    return schema.model_validate(request.get_json(silent=True) or {})


def validation_details(error):
    return error.errors(include_url=False, include_context=False, include_input=False)


def arg_flag(name):
    """Boolean query filter, applied only when the value is 'true'."""
    return request.args.get(name, "").strip().lower() == "true"


def arg_optional_bool(name):
    value = request.args.get(name)
    if value is None or value == "":
        return None
    return value.strip().lower() == "true"


def update_fields(payload, model):
    """
    Fields the client sent, explicit nulls included, and the camelCase names of
    any NOT NULL columns among them that were sent as null.
    """
    fields = payload.model_dump(exclude_unset=True)
    columns = model.__table__.columns
    not_nullable = [
        to_camel(key)
        for key, value in fields.items()
        if value is None and key in columns and not columns[key].nullable
    ]
    return fields, not_nullable
