from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from pocatalog.IO.PoFileReader import parse
from pocatalog.Localization.Catalog import Catalog
from pocatalog.Localization.Exceptions import CatalogsNotInitializedError, PoCatalogError
from pocatalog.Localization.Facades import Lang
from pocatalog.Localization.TranslationManager import (
    DirectoryCatalogLoader,
    ManifestCatalogLoader,
    StaticCatalogLoader,
    TranslationManager,
)
from pocatalog.Localization.Translator import (
    Translator,
    __,
    _n,
    app_locale,
    get_translator,
    set_app_locale,
    use_translator,
)

from .conftest import PLURAL_PLURAL, PLURAL_SINGULAR


@pytest.fixture
def manager(lang_dir: Path) -> TranslationManager:
    return TranslationManager(str(lang_dir))


@pytest.fixture
def german_catalog() -> Catalog:
    return parse('msgid "Only German"\nmsgstr "Nur Deutsch"\n', culture='de')


class TestTranslationManager:
    """Lookups through a manager reading a catalog directory."""
    
    def test_translate(self, manager: TranslationManager) -> None:
        assert manager.translate('fr-FR', 'Save') == 'Enregistrer'
        assert manager.translate('fr-FR', 'Unknown message') == 'Unknown message'
        assert manager.translate('fr-FR', 'Untranslated text') == 'Untranslated text'
    
    def test_translate_with_context(self, manager: TranslationManager) -> None:
        assert manager.translate('fr-FR', 'Open', context='menu') == 'Ouvrir'
        assert manager.translate('fr-FR', 'Open', context='verb') == 'Ouvrir le fichier'
        assert manager.translate('fr-FR', 'Open') == 'Open'
    
    def test_translate_formats_arguments(self, manager: TranslationManager) -> None:
        assert manager.translate('fr-FR', 'Hello {0}', 'Ada') == 'Hello Ada'
    
    def test_translate_plural(self, manager: TranslationManager) -> None:
        assert manager.translate_plural('fr-FR', PLURAL_SINGULAR, PLURAL_PLURAL, 3, 3) == \
            '3 fichiers médias restaurés depuis la corbeille.'
        assert manager.translate_plural('fr-FR', PLURAL_SINGULAR, PLURAL_PLURAL, 0, 0) == \
            '0 fichier média restauré depuis la corbeille.'
    
    def test_translate_plural_without_entry_uses_culture_rule(self, manager: TranslationManager) -> None:
        assert manager.translate_plural('fr-FR', '{0} tag', '{0} tags', 0, 0) == '0 tag'
        assert manager.translate_plural('fr-FR', '{0} tag', '{0} tags', 2, 2) == '2 tags'
    
    def test_first_culture_becomes_current(self, manager: TranslationManager) -> None:
        manager.translate('fr_FR', 'Save')
        
        assert manager.current_culture == 'fr-FR'
        assert manager.translate(None, 'Save') == 'Enregistrer'
    
    def test_has_and_find_entry(self, manager: TranslationManager) -> None:
        assert manager.has('fr-FR', 'Delete')
        assert not manager.has('fr-FR', 'Delete', context='menu')
        assert manager.find_entry('fr-FR', None) is None
    
    def test_language_catalog_serves_regions(self, tmp_path: Path, french_po: Path) -> None:
        shutil.copy(french_po, tmp_path / 'messages.fr.po')
        manager = TranslationManager(str(tmp_path))
        
        assert manager.translate('fr-CA', 'Save') == 'Enregistrer'
    
    def test_region_catalogs_can_be_excluded(self, tmp_path: Path, french_po: Path) -> None:
        shutil.copy(french_po, tmp_path / 'messages.fr.po')
        manager = TranslationManager(str(tmp_path), include_region_code2=False)
        
        assert manager.translate('fr-CA', 'Save') == 'Save'
    
    def test_without_catalogs(self) -> None:
        manager = TranslationManager()
        
        with pytest.raises(CatalogsNotInitializedError):
            manager.translate(None, 'Save')
        with pytest.raises(CatalogsNotInitializedError):
            manager.translate('fr-FR', 'Save')
    
    def test_static_loader(self, french_catalog: Catalog, german_catalog: Catalog) -> None:
        manager = TranslationManager(loader=StaticCatalogLoader([french_catalog, german_catalog]))
        
        assert manager.translate('de', 'Only German') == 'Nur Deutsch'
        assert sorted(manager.get_available_cultures()) == ['de', 'fr-FR']
    
    def test_directory_loader_reads_subdirectories(self, tmp_path: Path, french_po: Path) -> None:
        nested = tmp_path / 'admin'
        nested.mkdir()
        shutil.copy(french_po, nested / 'admin.fr-FR.po')
        
        assert DirectoryCatalogLoader(str(tmp_path)).load('fr-FR') == []
        assert len(DirectoryCatalogLoader(str(tmp_path), include_subdirectories=True).load('fr-FR')) == 1  # type: ignore[arg-type]
    
    def test_reload_picks_up_changes(self, manager: TranslationManager, lang_dir: Path) -> None:
        assert manager.translate('fr-FR', 'Save') == 'Enregistrer'
        
        path = lang_dir / 'messages.fr-FR.po'
        path.write_text(path.read_text(encoding='utf-8').replace('Enregistrer', 'Sauvegarder'), encoding='utf-8')
        
        assert manager.translate('fr-FR', 'Save') == 'Enregistrer'
        manager.reload()
        assert manager.translate('fr-FR', 'Save') == 'Sauvegarder'
    
    def test_close_drops_catalogs(self, manager: TranslationManager) -> None:
        with manager:
            manager.translate('fr-FR', 'Save')
            assert manager.get_available_cultures() == ['fr-FR']
        
        assert manager.get_available_cultures() == []
    
    def test_start_watching_requires_directory(self) -> None:
        with pytest.raises(CatalogsNotInitializedError):
            TranslationManager().start_watching()
    
    async def test_load_translations_async(self, manager: TranslationManager) -> None:
        await manager.load_translations_async('fr-FR')
        
        assert manager.get_available_cultures() == ['fr-FR']


class TestManifestCatalogLoader:
    
    def test_yaml_manifest(self, lang_dir: Path) -> None:
        manifest = lang_dir / 'catalogs.yaml'
        manifest.write_text('fr-FR:\n  - messages.fr-FR.po\n', encoding='utf-8')
        manager = TranslationManager(loader=ManifestCatalogLoader(str(manifest)))
        
        assert manager.translate('fr-FR', 'Save') == 'Enregistrer'
    
    def test_json_manifest_with_language_entry(self, lang_dir: Path) -> None:
        manifest = lang_dir / 'catalogs.json'
        manifest.write_text(json.dumps({'fr': ['messages.fr-FR.po']}), encoding='utf-8')
        
        catalogs = ManifestCatalogLoader(str(manifest)).load('fr-CA')
        
        assert catalogs is not None
        assert [catalog.culture_name for catalog in catalogs] == ['fr']
    
    def test_invalid_manifest(self, tmp_path: Path) -> None:
        manifest = tmp_path / 'catalogs.yaml'
        manifest.write_text('- just\n- a list\n', encoding='utf-8')
        
        with pytest.raises(PoCatalogError):
            ManifestCatalogLoader(str(manifest)).load('fr-FR')


class TestTranslator:
    """Culture-bound translation helpers."""
    
    @pytest.fixture
    def translator(self, french_catalog: Catalog, german_catalog: Catalog) -> Translator:
        manager = TranslationManager(loader=StaticCatalogLoader([french_catalog, german_catalog]))
        return Translator(manager, 'fr-FR', fallback_locale='de')
    
    def test_get_and_choice(self, translator: Translator) -> None:
        assert translator.get('Save') == 'Enregistrer'
        assert translator.trans('Open', context='verb') == 'Ouvrir le fichier'
        assert translator.choice(PLURAL_SINGULAR, PLURAL_PLURAL, 2, 2) == \
            '2 fichiers médias restaurés depuis la corbeille.'
    
    def test_fallback_locale(self, translator: Translator) -> None:
        assert translator.get('Only German') == 'Nur Deutsch'
        assert translator.get('Missing everywhere') == 'Missing everywhere'
    
    def test_context_locale_wins(self, translator: Translator) -> None:
        set_app_locale('de')
        
        assert translator.get_current_locale() == 'de'
        assert translator.get('Save') == 'Save'
    
    def test_helpers_with_bound_translator(self, translator: Translator) -> None:
        use_translator(translator)
        
        assert get_translator() is translator
        assert __('Save') == 'Enregistrer'
        assert _n(PLURAL_SINGULAR, PLURAL_PLURAL, 1, 1) == '1 fichier média restauré depuis la corbeille.'
        assert app_locale() == 'fr-FR'
    
    def test_helpers_without_translator(self) -> None:
        assert __('Hello {0}', 'Ada') == 'Hello Ada'
        assert _n('{0} file', '{0} files', 1, 1) == '1 file'
        assert _n('{0} file', '{0} files', 0, 0) == '0 files'
        assert app_locale() is None
    
    def test_facade(self, translator: Translator) -> None:
        with pytest.raises(CatalogsNotInitializedError):
            Lang.translator()
        assert not Lang.has('Save')
        
        use_translator(translator)
        
        assert Lang.get('Save') == 'Enregistrer'
        assert Lang.has('Save')
        assert Lang.choice('{0} tag', '{0} tags', 5, 5) == '5 tags'
        assert 'fr-FR' in Lang.get_available_locales()
        
        Lang.set_locale('de')
        assert Lang.get_locale() == 'de'


class TestManagerFromConfig:
    
    def test_from_config(self, lang_dir: Path) -> None:
        manager = TranslationManager.from_config({
            'po_path': str(lang_dir),
            'cache_translations': False,
            'include_region_code2': False,
            'watch_files': False,
        })
        
        assert manager.caching_disabled
        assert not manager.include_region_code2
        assert manager.file_watcher is None
        assert manager.translate('fr-FR', 'Save') == 'Enregistrer'
    
    def test_from_config_starts_watcher(self, lang_dir: Path) -> None:
        manager = TranslationManager.from_config({
            'po_path': str(lang_dir),
            'watch_files': True,
            'poll_interval': 0,
            'change_debounce': 1,
            'reload_queue_size': 10,
        })
        
        try:
            assert manager.file_watcher is not None
            assert manager.file_watcher.is_running
            assert manager.file_watcher.queue.maxsize == 10
        finally:
            manager.close()
        
        assert not manager.file_watcher.is_running
    
    def test_default_settings(self) -> None:
        from config.localization import LOCALIZATION_CONFIG
        
        manager = TranslationManager.from_config()
        
        assert manager.po_directory == LOCALIZATION_CONFIG['po_path']
        manager.close()
