from __future__ import annotations

from .Catalog import Catalog, HeaderDict, file_id_for
from .CatalogSet import CatalogSet, find_entry
from .Exceptions import (
    CatalogsNotInitializedError,
    CultureNotFoundError,
    PluralFormsError,
    PluralFormsEvaluationError,
    PluralFormsSyntaxError,
    PluralIndexError,
    PoCatalogError,
    PoFormatError,
    SaveChangesError,
)
from .Facades import Lang, TranslationFacade
from .LocaleManager import (
    LocaleDetector,
    LocaleManager,
    culture_name,
    get_culture_info,
    normalize_culture,
)
from .Translation import CONTEXT_SEPARATOR, Translation, make_key
from .TranslationManager import (
    CatalogLoader,
    DirectoryCatalogLoader,
    ManifestCatalogLoader,
    StaticCatalogLoader,
    TranslationManager,
)
from .Translator import (
    Translator,
    __,
    _n,
    app_locale,
    current_locale,
    current_translator,
    get_translator,
    set_app_locale,
    trans,
    trans_choice,
    use_translator,
)

__all__ = [
    'Catalog',
    'HeaderDict',
    'file_id_for',
    'CatalogSet',
    'find_entry',
    'CatalogsNotInitializedError',
    'CultureNotFoundError',
    'PluralFormsError',
    'PluralFormsEvaluationError',
    'PluralFormsSyntaxError',
    'PluralIndexError',
    'PoCatalogError',
    'PoFormatError',
    'SaveChangesError',
    'Lang',
    'TranslationFacade',
    'LocaleDetector',
    'LocaleManager',
    'culture_name',
    'get_culture_info',
    'normalize_culture',
    'CONTEXT_SEPARATOR',
    'Translation',
    'make_key',
    'CatalogLoader',
    'DirectoryCatalogLoader',
    'ManifestCatalogLoader',
    'StaticCatalogLoader',
    'TranslationManager',
    'Translator',
    '__',
    '_n',
    'app_locale',
    'current_locale',
    'current_translator',
    'get_translator',
    'set_app_locale',
    'trans',
    'trans_choice',
    'use_translator',
]
