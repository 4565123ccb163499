from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..Exceptions import PluralFormsEvaluationError
from .PluralFormsParser import PluralFormsParser, Token, TERNARY

DEFAULT_EXPRESSION = 'n != 1'
DEFAULT_PLURAL_COUNT = 2

PluralSelector = Callable[[int], int]

BINARY_OPERATORS: Dict[str, Callable[[int, int], int]] = {
    '%': lambda a, b: a % b,
    '<': lambda a, b: int(a < b),
    '<=': lambda a, b: int(a <= b),
    '>': lambda a, b: int(a > b),
    '>=': lambda a, b: int(a >= b),
    '==': lambda a, b: int(a == b),
    '!=': lambda a, b: int(a != b),
    '&&': lambda a, b: int(bool(a) and bool(b)),
    '||': lambda a, b: int(bool(a) or bool(b)),
}


class PluralRuleKind(Enum):
    """Where an evaluator gets its plural index from."""
    COMPILED_EXPRESSION = 'compiled_expression'
    NATIVE_RULE = 'native_rule'


class PluralFormsEvaluator:
    """
    Resolve the plural form index for a count.
    
    Either runs the postfix program compiled from a Plural-Forms expression
    or delegates to a native selector (the per-language rule table). Results
    are memoized per count.
    """
    
    def __init__(
        self,
        expression: Optional[str] = DEFAULT_EXPRESSION,
        selector: Optional[PluralSelector] = None,
        plural_count: Optional[int] = None
    ) -> None:
        self._cache: Dict[int, int] = {}
        self._lock = threading.Lock()
        self.plural_count = plural_count
        
        if selector is not None:
            self.kind = PluralRuleKind.NATIVE_RULE
            self.expression: Optional[str] = None
            self._selector: Optional[PluralSelector] = selector
            self._parser: Optional[PluralFormsParser] = None
        else:
            self.kind = PluralRuleKind.COMPILED_EXPRESSION
            self.expression = expression or DEFAULT_EXPRESSION
            self._selector = None
            self._parser = PluralFormsParser(self.expression)
            # Compile eagerly so syntax errors surface at construction.
            self._parser.parse()
    
    @classmethod
    def from_expression(cls, expression: str, plural_count: Optional[int] = None) -> PluralFormsEvaluator:
        return cls(expression=expression, plural_count=plural_count)
    
    @classmethod
    def from_selector(cls, selector: PluralSelector, plural_count: Optional[int] = None) -> PluralFormsEvaluator:
        return cls(selector=selector, plural_count=plural_count)
    
    @property
    def tokens(self) -> List[Token]:
        """Compiled postfix program, empty for native rules"""
        return self._parser.tokens if self._parser is not None else []
    
    def evaluate(self, n: int) -> int:
        """Return the plural form index for ``n``."""
        cached = self._cache.get(n)
        if cached is not None:
            return cached
        
        if self._selector is not None:
            result = int(self._selector(n))
        else:
            result = self.execute(n)
        
        with self._lock:
            self._cache[n] = result
        return result
    
    __call__ = evaluate
    
    def execute(self, n: int) -> int:
        """Run the postfix program for ``n`` without touching the cache."""
        if self._parser is None:
            return int(self._selector(n)) if self._selector is not None else 0
        
        stack: List[int] = []
        
        for token in self._parser.tokens:
            if token.kind == 'var':
                stack.append(n)
                continue
            if token.kind == 'value':
                stack.append(int(token.value))
                continue
            
            operator = token.value
            try:
                if operator == TERNARY:
                    v3 = stack.pop()
                    v2 = stack.pop()
                    v1 = stack.pop()
                    stack.append(v2 if v1 else v3)
                elif operator in BINARY_OPERATORS:
                    v2 = stack.pop()
                    v1 = stack.pop()
                    stack.append(BINARY_OPERATORS[operator](v1, v2))
                else:
                    raise PluralFormsEvaluationError(f"Unknown operator `{operator}` during evaluation")
            except IndexError as e:
                raise PluralFormsEvaluationError(
                    f"Not enough values on the stack for operator `{operator}`"
                ) from e
            except ZeroDivisionError as e:
                raise PluralFormsEvaluationError(f"Modulo by zero in `{self.expression}`") from e
        
        if len(stack) != 1:
            raise PluralFormsEvaluationError('Too many values remaining on the stack')
        
        return stack[0]
    
    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
    
    def __repr__(self) -> str:
        if self.kind is PluralRuleKind.NATIVE_RULE:
            return f"PluralFormsEvaluator(native, plural_count={self.plural_count})"
        return f"PluralFormsEvaluator({self.expression!r}, plural_count={self.plural_count})"
