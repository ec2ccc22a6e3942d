import math

import pytest

from src.calculations.kpis import KPI_KEYS, derive_kpis, safe_pct, threshold_status
from src.models.account import accounts_to_frame


def test_headline_ratios_for_four_companies(companies) -> None:
    kpis = derive_kpis(companies)

    assert kpis['total_exposure']['value'] == 2_450_000_000
    assert kpis['total_exposure']['unit'] == 'currency'
    assert kpis['npa']['value'] == pytest.approx(28.571, abs=0.01)
    assert kpis['npa']['unit'] == 'percent'
    assert kpis['par']['value'] == pytest.approx(44.898, abs=0.01)
    assert kpis['delinquency']['value'] == 50.0
    assert kpis['utilization']['value'] == pytest.approx(84.483, abs=0.01)


def test_par_population_is_superset_of_npa(companies) -> None:
    kpis = derive_kpis(companies)
    assert kpis['par']['value'] >= kpis['npa']['value']


def test_raroc_lgd_and_expected_loss(companies) -> None:
    kpis = derive_kpis(companies)

    # mean score 705 -> 705 / 850 * 25
    assert kpis['raroc']['value'] == pytest.approx(20.735, abs=0.01)
    # (2450 - 1900) / 2450
    assert kpis['lgd']['value'] == pytest.approx(22.449, abs=0.01)
    assert kpis['expected_loss']['value'] == pytest.approx(700_000_000 * kpis['lgd']['value'] / 100.0)


def test_lgd_is_clamped_when_security_exceeds_exposure(make_account) -> None:
    df = accounts_to_frame([make_account(credit_exposure=100.0, security_value=500.0)])
    assert derive_kpis(df)['lgd']['value'] == 0.0


def test_threshold_objects_and_status(companies) -> None:
    kpis = derive_kpis(companies)

    assert kpis['npa']['threshold'] == {'green': 3.0, 'amber': 5.0, 'status': 'red'}
    assert kpis['utilization']['threshold']['status'] == 'amber'
    assert kpis['raroc']['threshold']['status'] == 'green'
    assert 'threshold' not in kpis['lgd']
    assert 'threshold' not in kpis['total_exposure']


def test_threshold_status_boundaries_are_inclusive() -> None:
    assert threshold_status('npa', 3.0) == 'green'
    assert threshold_status('npa', 5.0) == 'amber'
    assert threshold_status('npa', 5.01) == 'red'
    assert threshold_status('raroc', 15.0) == 'green'
    assert threshold_status('raroc', 10.0) == 'amber'
    assert threshold_status('raroc', 9.99) == 'red'


def test_trend_bands(companies) -> None:
    kpis = derive_kpis(companies)
    assert kpis['npa']['trend'] == 'up'
    assert kpis['lgd']['trend'] == 'stable'
    assert kpis['expected_loss']['trend'] == 'down'


def test_change_percent_against_previous_snapshot(companies) -> None:
    first = derive_kpis(companies)
    assert all(first[k]['change_percent'] == 0.0 for k in KPI_KEYS)

    second = derive_kpis(companies.iloc[:2], previous=first)
    assert second['npa']['change_percent'] == pytest.approx(-100.0)
    assert second['total_exposure']['change_percent'] == pytest.approx((1250 - 2450) / 2450 * 100)

    # A zero baseline reports no change rather than dividing by zero.
    third = derive_kpis(companies, previous=second)
    assert third['npa']['change_percent'] == 0.0


def test_empty_input_returns_zero_values(empty_accounts) -> None:
    kpis = derive_kpis(empty_accounts)

    assert set(kpis) == set(KPI_KEYS)
    for key in KPI_KEYS:
        assert kpis[key]['value'] == 0
        assert kpis[key]['trend'] == 'stable'
        assert 'threshold' not in kpis[key]


def test_zero_credit_limit_gives_zero_utilization(make_account) -> None:
    df = accounts_to_frame([make_account(credit_limit=0.0), make_account(account_id='x', credit_limit=0.0)])
    kpis = derive_kpis(df)
    assert kpis['utilization']['value'] == 0.0
    assert all(not math.isnan(kpis[k]['value']) for k in KPI_KEYS)


def test_zero_exposure_guards_every_ratio(make_account) -> None:
    df = accounts_to_frame([make_account(credit_exposure=0.0, credit_status='Delinquent')])
    kpis = derive_kpis(df)
    assert kpis['npa']['value'] == 0.0
    assert kpis['par']['value'] == 0.0
    assert kpis['lgd']['value'] == 0.0
    assert all(math.isfinite(kpis[k]['value']) for k in KPI_KEYS)


def test_safe_pct() -> None:
    assert safe_pct(1.0, 0.0) == 0.0
    assert safe_pct(1.0, 4.0) == 25.0
