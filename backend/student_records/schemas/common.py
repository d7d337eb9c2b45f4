"""
Schémas Pydantic communs : base camelCase, métadonnées de pagination
et enveloppe de réponse uniforme renvoyée par tous les endpoints.

Format :
    {"results": ..., "status": true, "message": "...", "metaData": {...}, "statusCode": 200}
"""

import math
from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base des schémas exposés : camelCase sur le fil, snake_case accepté en entrée."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MetaData(CamelModel):
    page_index: int
    page_size: int
    total_count: int
    total_pages: int
    showing: str

    @classmethod
    def create(cls, page_index: int, page_size: int, total_count: int) -> "MetaData":
        total_pages = math.ceil(total_count / page_size)
        start_item = (page_index - 1) * page_size + 1
        end_item = min(page_index * page_size, total_count)
        showing = (
            f"Showing {start_item} to {end_item} of {total_count} entries"
            if total_count > 0 else "No entries found"
        )
        return cls(
            page_index=page_index,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            showing=showing,
        )


class ApiResponse(CamelModel, Generic[T]):
    results: Optional[T] = None
    status: bool = True
    message: str = ""
    meta_data: Optional[MetaData] = None
    status_code: int = 200

    @classmethod
    def ok(cls, results=None, message: str = "", meta_data: Optional[MetaData] = None) -> "ApiResponse":
        return cls(results=results, status=True, message=message, meta_data=meta_data, status_code=200)

    @classmethod
    def created(cls, results, message: str) -> "ApiResponse":
        return cls(results=results, status=True, message=message, status_code=201)

    @classmethod
    def fail(cls, message: str, status_code: int = 400) -> "ApiResponse":
        return cls(status=False, message=message, status_code=status_code)


class ErrorResponse(CamelModel):
    """Corps renvoyé par le handler global pour les erreurs non prévues."""
    status: bool = False
    message: str
    error_code: str
    timestamp: datetime
