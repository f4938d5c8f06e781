"""Tests for filter_daos / search_daos — AND-combined criteria and substring search."""

from datetime import date, timedelta

from dao_manager.core.dao_filters import filter_daos, search_daos
from dao_manager.core.dao_status_oracle import DeadlineStatusOracle
from dao_manager.schemas.dao import DaoFilters, DateRange
from tests.factories import TODAY, make_dao, make_member, make_tasks

ORACLE = DeadlineStatusOracle(clock=lambda: TODAY)


def _collection():
    return [
        make_dao(
            "a", numero_liste="DAO-2025-001", date_depot=TODAY + timedelta(days=1),
            autorite_contractante="Ministère de la Santé",
            equipe=[make_member("m1", "Awa Traoré")],
        ),
        make_dao(
            "b", numero_liste="DAO-2025-002", date_depot=TODAY + timedelta(days=20),
            autorite_contractante="Mairie de Bouaké", reference="AO/BKE/2025/02",
            equipe=[make_member("m2", "Koffi Yao")],
        ),
        make_dao(
            "c", numero_liste="DAO-2025-003", date_depot=TODAY - timedelta(days=5),
            objet_dossier="Réhabilitation de routes",
            tasks=make_tasks(*[100] * 15),
        ),
    ]


def _ids(daos):
    return [d.id for d in daos]


def test_empty_filters_return_everything():
    assert _ids(filter_daos(_collection(), DaoFilters(), ORACLE)) == ["a", "b", "c"]


def test_date_range_is_inclusive():
    filters = DaoFilters(date_range=DateRange(
        start=TODAY + timedelta(days=1), end=TODAY + timedelta(days=20),
    ))
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["a", "b"]


def test_date_range_excludes_dossiers_just_outside_both_bounds():
    filters = DaoFilters(date_range=DateRange(
        start=TODAY + timedelta(days=2), end=TODAY + timedelta(days=19),
    ))
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == []


def test_date_range_bounds_are_applied_independently():
    lower_only = DaoFilters(date_range=DateRange(
        start=TODAY + timedelta(days=2), end=TODAY + timedelta(days=20),
    ))
    upper_only = DaoFilters(date_range=DateRange(
        start=TODAY + timedelta(days=1), end=TODAY + timedelta(days=19),
    ))
    assert _ids(filter_daos(_collection(), lower_only, ORACLE)) == ["b"]
    assert _ids(filter_daos(_collection(), upper_only, ORACLE)) == ["a"]


def test_authority_filter_is_case_insensitive_substring():
    filters = DaoFilters(autorite_contractante="SANTÉ")
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["a"]


def test_status_en_cours_excludes_completed():
    filters = DaoFilters(statut="en_cours")
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["a", "b"]


def test_status_termine_keeps_only_completed():
    filters = DaoFilters(statut="termine")
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["c"]


def test_status_a_risque_keeps_only_urgent():
    filters = DaoFilters(statut="a_risque")
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["a"]


def test_team_filter_matches_member_names():
    filters = DaoFilters(equipe="koffi")
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["b"]


def test_criteria_combine_with_and():
    filters = DaoFilters(statut="en_cours", autorite_contractante="mairie", equipe="awa")
    assert filter_daos(_collection(), filters, ORACLE) == []


def test_filters_accept_camel_case_payload():
    filters = DaoFilters.model_validate({
        "dateRange": {"start": "2025-01-01", "end": "2025-12-31"},
        "autoriteContractante": "mairie",
    })
    assert _ids(filter_daos(_collection(), filters, ORACLE)) == ["b"]


def test_search_blank_query_returns_whole_collection():
    assert _ids(search_daos(_collection(), "   ")) == ["a", "b", "c"]
    assert _ids(search_daos(_collection(), "")) == ["a", "b", "c"]


def test_search_matches_identifying_fields():
    daos = _collection()
    assert _ids(search_daos(daos, "dao-2025-002")) == ["b"]
    assert _ids(search_daos(daos, "routes")) == ["c"]
    assert _ids(search_daos(daos, "bke")) == ["b"]


def test_search_matches_team_member_names():
    assert _ids(search_daos(_collection(), "traoré")) == ["a"]


def test_search_without_hits_is_empty():
    assert search_daos(_collection(), "introuvable") == []


def test_date_range_outside_every_deadline():
    filters = DaoFilters(date_range=DateRange(start=date(2030, 1, 1), end=date(2030, 2, 1)))
    assert filter_daos(_collection(), filters, ORACLE) == []
