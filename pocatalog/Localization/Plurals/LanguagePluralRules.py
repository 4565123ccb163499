"""
Built-in plural rules per language, used when a catalog has no Plural-Forms header
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple


class PluralRuleInterface(ABC):
    """Interface for a language family's plural rule"""
    
    plural_count: int = 2
    
    @abstractmethod
    def get_plural_index(self, n: int) -> int:
        """Get the plural form index for the count"""
        pass


class SingleFormRule(PluralRuleInterface):
    """Languages without plural forms (Japanese, Chinese, Turkish...)"""
    
    plural_count = 1
    
    def get_plural_index(self, n: int) -> int:
        return 0


class NotOneRule(PluralRuleInterface):
    """Germanic and most Romance languages: n != 1"""
    
    def get_plural_index(self, n: int) -> int:
        return 0 if n == 1 else 1


class GreaterThanOneRule(PluralRuleInterface):
    """French, Brazilian Portuguese style: 0 and 1 are singular"""
    
    def get_plural_index(self, n: int) -> int:
        return 1 if n > 1 else 0


class TamazightRule(PluralRuleInterface):
    """Central Atlas Tamazight"""
    
    def get_plural_index(self, n: int) -> int:
        return 0 if n == 0 or n == 1 or 11 <= n <= 99 else 1


class ManxRule(PluralRuleInterface):
    """Manx"""
    
    def get_plural_index(self, n: int) -> int:
        return 0 if n % 10 == 1 or n % 10 == 2 or n % 20 == 0 else 1


class MacedonianRule(PluralRuleInterface):
    """Macedonian"""
    
    def get_plural_index(self, n: int) -> int:
        return 0 if n % 10 == 1 and n != 11 else 1


class LatvianRule(PluralRuleInterface):
    """Latvian"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n % 10 == 1 and n % 100 != 11:
            return 0
        return 1 if n != 0 else 2


class OneTwoOtherRule(PluralRuleInterface):
    """Irish, Inuktitut, Cornish and the Sami languages"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n == 1:
            return 0
        return 1 if n == 2 else 2


class LithuanianRule(PluralRuleInterface):
    """Lithuanian"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n % 10 == 1 and n % 100 != 11:
            return 0
        if n % 10 >= 2 and (n % 100 < 10 or n % 100 >= 20):
            return 1
        return 2


class SlavicRule(PluralRuleInterface):
    """
    Russian, Ukrainian, Belarusian and the Serbo-Croatian languages:
    - 1, 21, 31... = 0
    - 2-4, 22-24... = 1
    - 0, 5-20, 25-30... = 2
    """
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n % 10 == 1 and n % 100 != 11:
            return 0
        if 2 <= n % 10 <= 4 and (n % 100 < 10 or n % 100 >= 20):
            return 1
        return 2


class CzechSlovakRule(PluralRuleInterface):
    """Czech and Slovak"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n == 1:
            return 0
        return 1 if 2 <= n <= 4 else 2


class PolishRule(PluralRuleInterface):
    """Polish"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n == 1:
            return 0
        if 2 <= n % 10 <= 4 and (n % 100 < 10 or n % 100 >= 20):
            return 1
        return 2


class RomanianRule(PluralRuleInterface):
    """Romanian and Moldavian"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n == 1:
            return 0
        if n == 0 or 0 < n % 100 < 20:
            return 1
        return 2


class ZeroOneOtherRule(PluralRuleInterface):
    """Langi and Colognian"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n == 0:
            return 0
        return 1 if n == 1 else 2


class TachelhitRule(PluralRuleInterface):
    """Tachelhit"""
    
    plural_count = 3
    
    def get_plural_index(self, n: int) -> int:
        if n == 0 or n == 1:
            return 0
        return 1 if 2 <= n <= 10 else 2


class SlovenianRule(PluralRuleInterface):
    """Slovenian"""
    
    plural_count = 4
    
    def get_plural_index(self, n: int) -> int:
        if n % 100 == 1:
            return 0
        if n % 100 == 2:
            return 1
        return 2 if n % 100 in (3, 4) else 3


class ScottishGaelicRule(PluralRuleInterface):
    """Scottish Gaelic"""
    
    plural_count = 4
    
    def get_plural_index(self, n: int) -> int:
        if n in (1, 11):
            return 0
        if n in (2, 12):
            return 1
        return 2 if 3 <= n <= 10 or 13 <= n <= 19 else 3


class ArabicRule(PluralRuleInterface):
    """Arabic"""
    
    plural_count = 6
    
    def get_plural_index(self, n: int) -> int:
        if n in (0, 1, 2):
            return n
        if 3 <= n <= 10:
            return 3
        return 4 if 11 <= n <= 99 else 5


class WelshRule(PluralRuleInterface):
    """Welsh"""
    
    plural_count = 6
    
    def get_plural_index(self, n: int) -> int:
        if n in (0, 1, 2, 3):
            return n
        return 4 if n == 6 else 5


class DefaultRule(NotOneRule):
    """Fallback for languages missing from the table"""
    pass


_FAMILIES: List[Tuple[PluralRuleInterface, str]] = [
    (SingleFormRule(),
     'az bm bo dz fa id ig ii hu ja jv ka kde kea km kn ko lo ms my sah ses sg th to tr vi wo yo zh'),
    (NotOneRule(),
     'asa af bem bez bg bn brx ca cgg chr da de dv ee el en eo es et eu fi fo fur fy gl gsw gu ha haw '
     'he is it jmc kaj kcg kk kl ksb ku lb lg mas ml mn mr nah nb nd ne nl nn no nr ny nyn om or pa '
     'pap ps pt rof rm rwk saq seh sn so sq ss ssy st sv sw syr ta te teo tig tk tn ts ur wae ve vun '
     'xh xog zu'),
    (GreaterThanOneRule(), 'ak am bh fil ff fr guw hi kab ln mg nso ti wa'),
    (TamazightRule(), 'tzm'),
    (ManxRule(), 'gv'),
    (MacedonianRule(), 'mk'),
    (LatvianRule(), 'lv'),
    (OneTwoOtherRule(), 'ga iu kw naq se sma smi smj smn sms'),
    (LithuanianRule(), 'lt'),
    (SlavicRule(), 'be bs hr ru sh sr uk'),
    (CzechSlovakRule(), 'cs sk'),
    (PolishRule(), 'pl'),
    (RomanianRule(), 'mo ro'),
    (ZeroOneOtherRule(), 'ksh lag'),
    (TachelhitRule(), 'shi'),
    (SlovenianRule(), 'sl'),
    (ScottishGaelicRule(), 'gd'),
    (ArabicRule(), 'ar'),
    (WelshRule(), 'cy'),
]


def language_code(culture: Any) -> str:
    """Two- or three-letter language part of a culture tag or babel Locale."""
    language = getattr(culture, 'language', None)
    if language:
        return str(language).lower()
    
    text = str(culture or '').strip()
    for separator in ('-', '_', '.'):
        text = text.split(separator, 1)[0]
    return text.lower()


class LanguagePluralRules:
    """
    Lookup table from ISO language code to plural rule
    """
    
    def __init__(self) -> None:
        self.rules: Dict[str, PluralRuleInterface] = {}
        
        for rule, languages in _FAMILIES:
            for language in languages.split():
                self.rules[language] = rule
        
        self.default_rule: PluralRuleInterface = DefaultRule()
    
    def get_rule(self, culture: Any) -> PluralRuleInterface:
        """Get the rule for a culture, falling back to the n != 1 rule"""
        return self.rules.get(language_code(culture), self.default_rule)
    
    def get_plural_index(self, culture: Any, n: int) -> Tuple[int, int]:
        """Return ``(index, plural_count)`` for ``n`` in the culture's language"""
        rule = self.get_rule(culture)
        return rule.get_plural_index(n), rule.plural_count
    
    def add_rule(self, language: str, rule: PluralRuleInterface) -> None:
        """Add a custom plural rule for a language"""
        self.rules[language.lower()] = rule
    
    def has_rule(self, culture: Any) -> bool:
        """Check if a culture's language has a specific rule"""
        return language_code(culture) in self.rules
    
    def get_available_languages(self) -> List[str]:
        """Get list of languages with plural rules"""
        return sorted(self.rules.keys())


# Global rule table
language_plural_rules = LanguagePluralRules()


def get_plural_index(culture: Any, n: int) -> Tuple[int, int]:
    """Plural index and form count for ``n`` using the built-in table."""
    return language_plural_rules.get_plural_index(culture, n)
