"""Request validators: rule tables evaluated by ``rules.evaluate``."""

from api.validators.rules import Evaluation, FieldRule, evaluate, validate_or_raise

__all__ = ["Evaluation", "FieldRule", "evaluate", "validate_or_raise"]
