from marshmallow import Schema, fields, EXCLUDE

USER_UPGRADED = "user.upgraded"


class PolkaDataSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    user_id = fields.UUID(required=True)


class PolkaWebhookSchema(Schema):
    """
    Payload sent by Polka, e.g.
    {"event": "user.upgraded", "data": {"user_id": "3311741c-..."}}
    Only user.upgraded events carry a user we act on.
    """

    class Meta:
        unknown = EXCLUDE

    event = fields.String(required=True)
    data = fields.Nested(PolkaDataSchema, load_default=None, allow_none=True)
