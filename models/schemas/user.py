from marshmallow import Schema, fields, EXCLUDE

from models.schemas.common import validate_user_id, validate_user_password


class UserCredentialsSchema(Schema):
    """Body of /signup and /signin."""

    class Meta:
        unknown = EXCLUDE

    id = fields.String(
        required=True,
        validate=validate_user_id,
        error_messages={"required": '"id" param is required', "null": '"id" param is required'},
    )
    # the untrimmed value is what gets hashed and compared
    password = fields.String(
        required=True,
        load_only=True,
        validate=validate_user_password,
        error_messages={
            "required": "password expected as string between 4 and 10 characters long",
            "null": "password expected as string between 4 and 10 characters long",
        },
    )


class RefreshSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh = fields.String(load_default="", allow_none=True)


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
