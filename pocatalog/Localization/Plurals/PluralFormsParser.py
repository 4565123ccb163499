"""
Compiler for gettext Plural-Forms expressions

Turns the C-like infix expression found in a PO header
(e.g. ``n%10==1 && n%100!=11 ? 0 : 1``) into a postfix token list
using the shunting-yard algorithm.
"""
from __future__ import annotations

import threading
from typing import Dict, List, NamedTuple, Optional

from ..Exceptions import PluralFormsSyntaxError


OP_CHARS = '|&><!=%?:'
SKIP_CHARS = ' \t\r\n;\0'
TERNARY = '?:'

# Higher binds tighter; parentheses never get popped by an operator.
OPERATOR_PRECEDENCE: Dict[str, int] = {
    '%': 6,
    '<': 5,
    '<=': 5,
    '>': 5,
    '>=': 5,
    '==': 4,
    '!=': 4,
    '&&': 3,
    '||': 2,
    '?:': 1,
    '?': 1,
    '(': 0,
    ')': 0,
}


class Token(NamedTuple):
    """A single postfix instruction"""
    kind: str
    value: str

    @classmethod
    def var(cls) -> Token:
        return cls('var', 'n')

    @classmethod
    def literal(cls, digits: str) -> Token:
        return cls('value', digits)

    @classmethod
    def op(cls, operator: str) -> Token:
        return cls('op', operator)


class PluralFormsParser:
    """Shunting-yard parser for a single plural forms expression"""
    
    def __init__(self, expression: str) -> None:
        self.expression = expression
        self._tokens: Optional[List[Token]] = None
        self._lock = threading.Lock()
    
    @property
    def tokens(self) -> List[Token]:
        """Postfix tokens, compiled on first access"""
        return self.parse()
    
    def parse(self) -> List[Token]:
        """Compile the expression; subsequent calls return the memoized result."""
        if self._tokens is None:
            with self._lock:
                if self._tokens is None:
                    self._tokens = self._compile()
        return self._tokens
    
    def _compile(self) -> List[Token]:
        expression = self.expression
        output: List[Token] = []
        stack: List[str] = []
        pos = 0
        length = len(expression)
        
        while pos < length:
            char = expression[pos]
            
            if char in SKIP_CHARS:
                pos += 1
            
            elif char == 'n':
                output.append(Token.var())
                pos += 1
            
            elif char.isdigit():
                end = pos
                while end < length and expression[end].isdigit():
                    end += 1
                output.append(Token.literal(expression[pos:end]))
                pos = end
            
            elif char == '(':
                stack.append(char)
                pos += 1
            
            elif char == ')':
                while stack and stack[-1] != '(':
                    output.append(Token.op(stack.pop()))
                if not stack:
                    raise PluralFormsSyntaxError(expression, 'Mismatched parentheses')
                stack.pop()
                pos += 1
            
            elif char in OP_CHARS:
                end = pos
                while end < length and expression[end] in OP_CHARS:
                    end += 1
                operator = expression[pos:end]
                pos = end
                
                if operator not in OPERATOR_PRECEDENCE:
                    raise PluralFormsSyntaxError(expression, f"Unknown operator `{operator}`")
                
                if operator == ':':
                    self._close_ternary(stack, output)
                    continue
                
                self._push_operator(operator, stack, output)
            
            else:
                raise PluralFormsSyntaxError(expression, f"Unknown symbol `{char}`")
        
        while stack:
            operator = stack.pop()
            if operator in ('(', ')'):
                raise PluralFormsSyntaxError(expression, 'Mismatched parentheses')
            if operator == '?':
                raise PluralFormsSyntaxError(expression, 'Missing ternary `:` operator')
            output.append(Token.op(operator))
        
        return output
    
    def _push_operator(self, operator: str, stack: List[str], output: List[Token]) -> None:
        precedence = OPERATOR_PRECEDENCE[operator]
        
        while stack:
            top = OPERATOR_PRECEDENCE[stack[-1]]
            # The ternary is right-associative: equal precedence stays on the stack.
            if operator == '?':
                if precedence >= top:
                    break
            elif precedence > top:
                break
            output.append(Token.op(stack.pop()))
        
        stack.append(operator)
    
    def _close_ternary(self, stack: List[str], output: List[Token]) -> None:
        while stack:
            operator = stack.pop()
            if operator == '?':
                stack.append(TERNARY)
                return
            if operator == '(':
                break
            output.append(Token.op(operator))
        
        raise PluralFormsSyntaxError(self.expression, 'Missing starting ? ternary operator')
