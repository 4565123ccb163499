from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...Localization.Catalog import Catalog
from ...Localization.Translation import Translation, make_key


class UpdatedTranslation(BaseModel):
    """Edited entry posted back by a catalog editor."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    row: int = Field(0, description="Position of the entry in the catalog")
    unique_key: Optional[str] = Field(None, alias="uniqueKey", description="Key of the entry before editing")
    context: Optional[str] = Field(None, description="msgctxt")
    singular: Optional[str] = Field(None, description="msgid")
    plural: Optional[str] = Field(None, description="msgid_plural")
    translations: Optional[List[str]] = Field(None, description="msgstr forms")
    extracted_comments: Optional[str] = Field(None, description="#. comments")
    translator_comments: Optional[str] = Field(None, description="# comments")
    flags: Optional[List[str]] = Field(None, description="#, flags")
    references: Optional[List[str]] = Field(None, description="#: references")
    
    @property
    def key(self) -> Optional[str]:
        return self.unique_key or make_key(self.singular, self.context)
    
    @classmethod
    def from_translation(cls, entry: Translation, row: int = 0) -> UpdatedTranslation:
        return cls(
            row=row,
            unique_key=entry.key,
            context=entry.context,
            singular=entry.singular,
            plural=entry.plural,
            translations=list(entry.translations),
            extracted_comments=entry.extracted_comments,
            translator_comments=entry.translator_comments,
            flags=list(entry.flags),
            references=list(entry.references),
        )


class UpdatedCatalog(BaseModel):
    """Catalog payload exchanged with a catalog editor."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    id: Optional[str] = Field(None, description="File id of the catalog")
    culture: Optional[str] = Field(None, description="Culture name")
    file_name: Optional[str] = Field(None, alias="fileName", description="Source file path")
    header_comments: Optional[str] = Field(None, description="Comments before the header entry")
    plural_count: int = Field(2, description="Number of plural forms")
    last_access_time: Optional[datetime] = Field(None, description="When the catalog was read")
    items: List[UpdatedTranslation] = Field(default_factory=list, description="Entries in catalog order")
    
    @classmethod
    def from_catalog(cls, catalog: Catalog) -> UpdatedCatalog:
        return cls(
            id=catalog.file_id,
            culture=catalog.culture_name or None,
            file_name=catalog.file_name,
            header_comments=catalog.header_comments,
            plural_count=catalog.plural_count,
            last_access_time=catalog.last_access_time,
            items=[
                UpdatedTranslation.from_translation(entry, row)
                for row, entry in enumerate(catalog.entries.values())
            ],
        )
