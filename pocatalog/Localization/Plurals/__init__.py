from __future__ import annotations

from .PluralFormsParser import PluralFormsParser, Token, OPERATOR_PRECEDENCE
from .PluralFormsEvaluator import (
    PluralFormsEvaluator,
    PluralRuleKind,
    DEFAULT_EXPRESSION,
    DEFAULT_PLURAL_COUNT,
)
from .LanguagePluralRules import (
    LanguagePluralRules,
    PluralRuleInterface,
    language_plural_rules,
    get_plural_index,
    language_code,
)

__all__ = [
    'PluralFormsParser',
    'Token',
    'OPERATOR_PRECEDENCE',
    'PluralFormsEvaluator',
    'PluralRuleKind',
    'DEFAULT_EXPRESSION',
    'DEFAULT_PLURAL_COUNT',
    'LanguagePluralRules',
    'PluralRuleInterface',
    'language_plural_rules',
    'get_plural_index',
    'language_code',
]
