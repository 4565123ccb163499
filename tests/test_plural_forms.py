from __future__ import annotations

from typing import List

import pytest

from pocatalog.Localization.Exceptions import PluralFormsSyntaxError
from pocatalog.Localization.Plurals import (
    PluralFormsEvaluator,
    PluralFormsParser,
    PluralRuleKind,
    Token,
    get_plural_index,
    language_plural_rules,
)

SLAVIC = 'n % 10 == 1 && n % 100 != 11 ? 0 : n % 10 >= 2 && n % 10 <= 4 && (n % 100 < 10 || n % 100 >= 20) ? 1 : 2'
ROMANIAN = 'n == 1 ? 0 : n == 0 || (n % 100 > 0 && n % 100 < 20) ? 1 : 2'
ARABIC = 'n == 0 ? 0 : n == 1 ? 1 : n == 2 ? 2 : n >= 3 && n <= 10 ? 3 : n >= 11 && n <= 99 ? 4 : 5'
GAELIC = 'n == 1 || n == 11 ? 0 : n == 2 || n == 12 ? 1 : (n >= 3 && n <= 10) || (n >= 13 && n <= 19) ? 2 : 3'
SLOVENIAN = 'n % 100 == 1 ? 0 : n % 100 == 2 ? 1 : n % 100 == 3 || n % 100 == 4 ? 2 : 3'


class TestPluralFormsParser:
    """Compilation of Plural-Forms expressions to postfix tokens."""
    
    def test_compiles_simple_comparison(self) -> None:
        """Operands come before their operator."""
        tokens = PluralFormsParser('n != 1').parse()
        
        assert tokens == [Token.var(), Token.literal('1'), Token.op('!=')]
    
    def test_modulo_binds_tighter_than_equality(self) -> None:
        tokens = PluralFormsParser('n%10==1').parse()
        
        assert [t.value for t in tokens] == ['n', '10', '%', '1', '==']
    
    def test_ternary_is_right_associative(self) -> None:
        tokens = PluralFormsParser('n==1 ? 0 : n==2 ? 1 : 2').parse()
        
        assert [t.value for t in tokens] == ['n', '1', '==', '0', 'n', '2', '==', '1', '2', '?:', '?:']
    
    def test_trailing_semicolon_is_ignored(self) -> None:
        assert PluralFormsParser('(n > 1);').parse() == PluralFormsParser('n > 1').parse()
    
    def test_parse_is_memoized(self) -> None:
        parser = PluralFormsParser('n != 1')
        
        assert parser.parse() is parser.parse()
    
    @pytest.mark.parametrize('expression', ['(n > 1', 'n > 1)', 'n ? 1', 'n : 1', 'n === 1', 'x > 1'])
    def test_invalid_expressions_raise(self, expression: str) -> None:
        with pytest.raises(PluralFormsSyntaxError):
            PluralFormsParser(expression).parse()
    
    def test_syntax_error_carries_expression(self) -> None:
        with pytest.raises(PluralFormsSyntaxError) as exc_info:
            PluralFormsParser('(n > 1').parse()
        
        assert exc_info.value.expression == '(n > 1'
        assert isinstance(exc_info.value, ValueError)


class TestPluralFormsEvaluator:
    """Evaluation of compiled expressions and native rules."""
    
    def test_reference_expressions_at_thirteen(self) -> None:
        """Known results for five languages at n=13."""
        evaluators = [PluralFormsEvaluator(e) for e in (SLAVIC, ROMANIAN, ARABIC, GAELIC, SLOVENIAN)]
        results: List[int] = [evaluator.evaluate(13) for evaluator in evaluators]
        
        assert results == [2, 1, 4, 2, 3]
    
    def test_default_expression(self) -> None:
        evaluator = PluralFormsEvaluator()
        
        assert evaluator.kind is PluralRuleKind.COMPILED_EXPRESSION
        assert [evaluator(n) for n in (0, 1, 2)] == [1, 0, 1]
    
    def test_memoized_and_direct_paths_agree(self) -> None:
        evaluator = PluralFormsEvaluator(SLAVIC)
        
        for n in range(0, 250):
            assert evaluator.evaluate(n) == evaluator.execute(n)
            assert evaluator.evaluate(n) == evaluator.evaluate(n)
    
    def test_slavic_expression_matches_native_rule(self) -> None:
        evaluator = PluralFormsEvaluator(SLAVIC)
        
        for n in range(0, 200):
            assert evaluator.evaluate(n) == get_plural_index('ru', n)[0]
    
    def test_native_selector(self) -> None:
        evaluator = PluralFormsEvaluator.from_selector(lambda n: 0 if n == 1 else 1, plural_count=2)
        
        assert evaluator.kind is PluralRuleKind.NATIVE_RULE
        assert evaluator.tokens == []
        assert evaluator.evaluate(5) == 1
    
    def test_syntax_error_surfaces_at_construction(self) -> None:
        with pytest.raises(PluralFormsSyntaxError):
            PluralFormsEvaluator('(n')
    
    def test_clear_cache(self) -> None:
        evaluator = PluralFormsEvaluator('n > 1')
        evaluator.evaluate(3)
        evaluator.clear_cache()
        
        assert evaluator.evaluate(3) == 1


class TestLanguagePluralRules:
    """Built-in per-language table."""
    
    @pytest.mark.parametrize('culture, n, expected', [
        ('fr-FR', 0, (0, 2)),
        ('fr', 2, (1, 2)),
        ('en-US', 1, (0, 2)),
        ('en', 0, (1, 2)),
        ('ja', 100, (0, 1)),
        ('ru', 21, (0, 3)),
        ('ru', 22, (1, 3)),
        ('ru', 25, (2, 3)),
        ('pl', 1, (0, 3)),
        ('pl', 12, (2, 3)),
        ('cs', 3, (1, 3)),
        ('ar', 13, (4, 6)),
        ('ar', 100, (5, 6)),
        ('cy', 6, (4, 6)),
        ('sl', 102, (1, 4)),
        ('shi', 1, (0, 3)),
    ])
    def test_plural_index(self, culture: str, n: int, expected: tuple) -> None:
        assert get_plural_index(culture, n) == expected
    
    def test_unknown_language_uses_default_rule(self) -> None:
        assert not language_plural_rules.has_rule('xx')
        assert language_plural_rules.get_plural_index('xx', 1) == (0, 2)
    
    def test_add_rule(self) -> None:
        rules = type(language_plural_rules)()
        rules.add_rule('XX', rules.get_rule('ja'))
        
        assert rules.has_rule('xx-YY')
        assert 'xx' in rules.get_available_languages()
