from marshmallow import Schema, fields, validates, ValidationError, EXCLUDE

from models.chirp import CHIRP_MAX_LENGTH


class ChirpCreateSchema(Schema):
    # the author always comes from the access token, never from the body
    class Meta:
        unknown = EXCLUDE

    body = fields.String(required=True)

    @validates("body")
    def _validate_body(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Chirp body cannot be empty")
        if len(value) > CHIRP_MAX_LENGTH:
            raise ValidationError("Chirp is too long")


class ChirpOutSchema(Schema):
    id = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    body = fields.String()
    user_id = fields.String()
