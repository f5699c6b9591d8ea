"""
Aggregation of filter predicates into one query.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from resourcelibrary_backend.exceptions import QueryParameterConflictException
from resourcelibrary_backend.filters.base import SqlFilter, field_join_alias

logger = logging.getLogger(__name__)

ENTITY_ALIAS = "e"


def combine_fragments(fragments: Iterable[SqlFilter]) -> tuple[Optional[str], dict[str, Any]]:
    """
    Join conditions with AND and merge their parameters.

    ``(None, None)`` fragments are skipped. Returns ``(None, {})`` when no
    condition is left.

    Raises:
        QueryParameterConflictException: If two fragments bind the same name
    """
    conditions = []
    params: dict[str, Any] = {}
    for condition, fragment_params in fragments:
        if condition is None:
            continue
        _merge_params(params, fragment_params or {})
        conditions.append(condition)

    if not conditions:
        return None, params
    return " AND ".join(conditions), params


def _merge_params(params: dict[str, Any], new_params: Mapping[str, Any]) -> None:
    for name, value in new_params.items():
        if name in params:
            raise QueryParameterConflictException(
                parameter=name,
                detail=f"Query parameter '{name}' is bound by more than one condition",
            )
        params[name] = value


def build_filtered_query(
    table: str,
    filters,
    formdata: Any,
    where: Optional[str] = None,
    params: Optional[Mapping[str, Any]] = None,
    limit: Optional[int] = None,
) -> TextClause:
    """
    Build ``SELECT e.id FROM <table> e`` restricted by every active filter.

    Each filter with a value joins its field's customfield_data row under
    the alias its column resolver refers to.

    Args:
        table: Entity table whose ids are the custom field instance ids
        filters: ResourceLibraryFilters of the table's area
        formdata: Submitted data
        where: Extra scope condition on alias ``e`` (e.g. ``e.course_id = :courseid``)
        params: Parameters of ``where``
        limit: Maximum number of ids
    """
    active = filters.get_sql_filters(formdata)

    joins = []
    join_params: dict[str, Any] = {}
    for filter_, _ in active:
        alias = field_join_alias(filter_.field)
        fieldid_param = f"{alias}_fieldid"
        joins.append(
            f"JOIN customfield_data {alias} "
            f"ON {alias}.instanceid = {ENTITY_ALIAS}.id AND {alias}.fieldid = :{fieldid_param}"
        )
        join_params[fieldid_param] = filter_.field.id

    condition, all_params = combine_fragments(
        [(where, dict(params or {})) if where else (None, None)]
        + [fragment for _, fragment in active]
    )
    _merge_params(all_params, join_params)

    sql = f"SELECT {ENTITY_ALIAS}.id FROM {table} {ENTITY_ALIAS}"
    if joins:
        sql += " " + " ".join(joins)
    if condition:
        sql += f" WHERE {condition}"
    sql += f" ORDER BY {ENTITY_ALIAS}.id"
    if limit is not None:
        sql += " LIMIT :result_limit"
        _merge_params(all_params, {"result_limit": limit})

    logger.debug(f"Filtered query on {table} with {len(active)} active filters: {sql}")
    return text(sql).bindparams(**all_params)
