from marshmallow import Schema, fields, validate

from .logics.scoring_policy import MODES, ROUNDS


class GradeRequestSchema(Schema):
    question_id = fields.Int(required=True)
    mode = fields.Str(required=True, validate=validate.OneOf(MODES))
    round = fields.Str(required=True, validate=validate.OneOf(ROUNDS))
    answer = fields.Str(required=True, validate=validate.Length(min=1))
    game_id = fields.Int(load_default=None, allow_none=True)
    displayed_points = fields.Int(load_default=None, allow_none=True, validate=validate.Range(min=0))


class AdminOverrideSchema(Schema):
    text = fields.Str(required=True, validate=validate.Length(min=1, max=512))
    notes = fields.Str(load_default=None, allow_none=True)
