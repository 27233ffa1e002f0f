from marshmallow import Schema, fields, validate

from triviastack_app.models import AnswerDispute
from triviastack_app.modules.grading.logics.scoring_policy import MODES


class DisputeSubmitSchema(Schema):
    question_id = fields.Int(required=True)
    answer = fields.Str(required=True, validate=validate.Length(min=1))
    game_id = fields.Int(load_default=None, allow_none=True)


class DisputeResolveSchema(Schema):
    note = fields.Str(load_default=None, allow_none=True)
    override_text = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=512))


class DisputeListArgsSchema(Schema):
    status = fields.Str(load_default=None, validate=validate.OneOf(AnswerDispute.STATUSES))
    mode = fields.Str(load_default=None, validate=validate.OneOf(MODES))
    page = fields.Int(load_default=1, validate=validate.Range(min=1))
    page_size = fields.Int(load_default=None, validate=validate.Range(min=1, max=100))
