"""
Pagination, recherche et tri partagés par tous les endpoints de liste.

Paramètres de requête : pageIndex (1), pageSize (20, max 100), search, sortBy, sortDescending.
"""

from typing import Optional

from fastapi import Query
from pydantic import Field, field_validator
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from student_records.config import settings
from student_records.schemas.common import CamelModel


class PaginationRequest(CamelModel):
    page_index: int = Field(default=1, ge=1)
    page_size: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1)
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_descending: bool = False

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        return min(v, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_index - 1) * self.page_size


def get_pagination(
    page_index: int = Query(1, alias="pageIndex", ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize", ge=1),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_descending: bool = Query(False, alias="sortDescending"),
) -> PaginationRequest:
    """Dépendance FastAPI — construit la requête de pagination depuis la query string."""
    return PaginationRequest(
        page_index=page_index,
        page_size=page_size,
        search=search,
        sort_by=sort_by,
        sort_descending=sort_descending,
    )


def apply_search(stmt, search: Optional[str], *columns):
    """Filtre "contient" insensible à la casse sur au moins une des colonnes."""
    if not search or not search.strip():
        return stmt
    pattern = f"%{search.strip()}%"
    return stmt.where(or_(*[column.ilike(pattern) for column in columns]))


def apply_sorting(stmt, pagination: PaginationRequest, sort_columns: dict, default: list):
    """
    Trie selon sortBy s'il figure dans la liste blanche `sort_columns`
    (clé en minuscules → colonne ou tuple de colonnes), sinon applique l'ordre par défaut.
    """
    columns = sort_columns.get((pagination.sort_by or "").lower())
    if columns is None:
        return stmt.order_by(*default)
    if not isinstance(columns, tuple):
        columns = (columns,)
    return stmt.order_by(*[
        column.desc() if pagination.sort_descending else column.asc()
        for column in columns
    ])


def paginate(db: Session, stmt, pagination: PaginationRequest, scalars: bool = True) -> tuple[list, int]:
    """
    Exécute la requête paginée et retourne (éléments, total).
    scalars=False retourne les lignes complètes (utile pour select(Entité, Jointure)).
    """
    total = db.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar() or 0

    result = db.execute(stmt.offset(pagination.offset).limit(pagination.page_size))
    items = result.scalars().all() if scalars else result.all()
    return list(items), total
