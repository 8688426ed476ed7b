from marshmallow import Schema, fields, pre_load, EXCLUDE


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class UserCredentialsSchema(Schema):
    """Body of POST /api/users and PUT /api/users."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=lambda s: len(s) > 0)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True, validate=lambda s: len(s.strip()) > 0)
    password = fields.String(required=True, validate=lambda s: len(s) > 0)
    expires_in_seconds = fields.Integer(load_default=None, allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class UserOutSchema(Schema):
    id = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    email = fields.String()
    is_chirpy_red = fields.Boolean()


