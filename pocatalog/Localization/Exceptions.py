from __future__ import annotations

from typing import Optional


class PoCatalogError(Exception):
    """Base exception for PO catalog handling"""
    pass


class PoFormatError(PoCatalogError, ValueError):
    """Exception raised when a PO file contains a malformed line"""
    
    def __init__(self, line_number: int, line: str, reason: Optional[str] = None) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        
        message = f"Invalid PO data at line {line_number}: {line!r}"
        if reason:
            message += f" ({reason})"
        
        super().__init__(message)


class PluralFormsError(PoCatalogError):
    """Base exception for plural forms expressions"""
    pass


class PluralFormsSyntaxError(PluralFormsError, ValueError):
    """Exception raised when a plural forms expression cannot be parsed"""
    
    def __init__(self, expression: str, message: str) -> None:
        self.expression = expression
        super().__init__(f"{message} in plural forms expression `{expression}`")


class PluralFormsEvaluationError(PluralFormsError, ArithmeticError):
    """Exception raised when a compiled plural forms expression fails to execute"""
    pass


class PluralIndexError(PoCatalogError, IndexError):
    """Exception raised when a plural index points outside the available translations"""
    
    def __init__(self, index: int, count: int, key: Optional[str] = None) -> None:
        self.index = index
        self.count = count
        self.key = key
        
        super().__init__(
            f"Plural index {index} is out of range for {count} translation(s)"
            + (f" of `{key}`" if key else "")
        )


class CultureNotFoundError(PoCatalogError, ValueError):
    """Exception raised when a culture name cannot be resolved to a known locale"""
    
    def __init__(self, culture: Optional[str], message: str = "Unsupported culture format.") -> None:
        self.culture = culture
        super().__init__(f"{message} Culture: {culture!r}")


class CatalogsNotInitializedError(PoCatalogError, RuntimeError):
    """Exception raised when no catalogs can be loaded for lookups"""
    
    def __init__(self) -> None:
        super().__init__("Translation catalogs have not been initialized.")


class SaveChangesError(PoCatalogError, OSError):
    """Exception raised when a catalog cannot be written back to its file"""
    
    def __init__(self, file_name: Optional[str], reason: str) -> None:
        self.file_name = file_name
        super().__init__(f"Cannot save catalog {file_name!r}: {reason}")
