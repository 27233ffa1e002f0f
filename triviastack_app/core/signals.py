"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker (Flask's signal backend) so the grading engine can announce
what happened without knowing who listens.

Usage:
    # Publisher (sender)
    from triviastack_app.core.signals import question_answered
    question_answered.send(None, user_id=1, question_id=2, ...)

    # Subscriber (receiver)
    @question_answered.connect
    def on_question_answered(sender, **kwargs):
        ...

Signals are only sent after the unit of work that produced them committed.
"""
from blinker import Namespace

grading_signals = Namespace()

# Signal: Fired after a grading transaction committed
# Payload: user_id, question_id, game_id, mode, correct, points, verdict_id
question_answered = grading_signals.signal('question_answered')

# Signal: Fired when historical verdicts were flipped by a recomputation pass
# Payload: user_id, question_id, verdict_ids, points_delta, source
verdicts_regraded = grading_signals.signal('verdicts_regraded')

# ============================================
# Dispute Signals
# ============================================
dispute_signals = Namespace()

# Payload: dispute_id, user_id, question_id, game_id
dispute_submitted = dispute_signals.signal('dispute_submitted')

# Payload: dispute_id, user_id, question_id, resolver_id, override_id, flipped
dispute_approved = dispute_signals.signal('dispute_approved')

# Payload: dispute_id, user_id, question_id, resolver_id
dispute_rejected = dispute_signals.signal('dispute_rejected')

# ============================================
# Achievement collaborator
# ============================================
achievement_signals = Namespace()

# Signal: Ask achievement evaluators what a user just unlocked.
# Payload: user_id, event ('question_answered' | 'dispute_approved'), payload (dict)
# Receivers return a list of newly unlocked achievement identifiers.
achievement_check = achievement_signals.signal('achievement_check')
