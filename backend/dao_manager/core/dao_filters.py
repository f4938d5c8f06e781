"""DAO Filters — pure filter and free-text search over an in-memory dossier collection.

Invariants:
    - Filter criteria combine with logical AND; absent fields impose no constraint
    - Date range is inclusive on both bounds, compared on date_depot
    - Text matching is case-insensitive substring, never tokenized or ranked
    - Status criteria re-derived through the oracle at query time
    - Empty/whitespace search query returns the whole collection, original order
"""

from collections.abc import Sequence

from dao_manager.core.domain_types import DaoStatus, StatusFilter
from dao_manager.core.repository_protocols import StatusOracle
from dao_manager.schemas.dao import Dao, DaoFilters


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def _team_has_name(dao: Dao, needle: str) -> bool:
    return any(_contains(member.name, needle) for member in dao.equipe)


def matches_status(status: DaoStatus, wanted: StatusFilter) -> bool:
    """Map an oracle status onto the three filter categories."""
    if wanted == StatusFilter.EN_COURS:
        return status != DaoStatus.COMPLETED
    if wanted == StatusFilter.TERMINE:
        return status == DaoStatus.COMPLETED
    return status == DaoStatus.URGENT


def matches_filters(dao: Dao, filters: DaoFilters, oracle: StatusOracle) -> bool:
    if filters.date_range:
        start, end = filters.date_range.start, filters.date_range.end
        if dao.date_depot < start or dao.date_depot > end:
            return False

    if filters.autorite_contractante:
        if not _contains(dao.autorite_contractante, filters.autorite_contractante):
            return False

    if filters.statut:
        progress = oracle.progress(dao.tasks)
        status = oracle.status(dao.date_depot, progress)
        if not matches_status(status, filters.statut):
            return False

    if filters.equipe:
        if not _team_has_name(dao, filters.equipe):
            return False

    return True


def filter_daos(
    daos: Sequence[Dao], filters: DaoFilters, oracle: StatusOracle,
) -> list[Dao]:
    return [dao for dao in daos if matches_filters(dao, filters, oracle)]


def search_daos(daos: Sequence[Dao], query: str) -> list[Dao]:
    """Substring search over identifying fields and team member names."""
    term = query.lower().strip()
    if not term:
        return list(daos)

    def _hit(dao: Dao) -> bool:
        return (
            term in dao.numero_liste.lower()
            or term in dao.objet_dossier.lower()
            or term in dao.reference.lower()
            or term in dao.autorite_contractante.lower()
            or _team_has_name(dao, term)
        )

    return [dao for dao in daos if _hit(dao)]
