from itertools import product

import pandas as pd

from src.calculations.filters import (
    apply_drill_down_filter,
    apply_filters,
    apply_global_filters,
    apply_page_filters,
    apply_search,
    sort_accounts,
    unique_filter_values,
)
from src.models.filter_state import (
    DrillDownFilter,
    FilterState,
    PageFilter,
    add_page_filter,
    set_asset_classification,
    set_drill_down_filter,
    set_lob,
    set_party_type,
    set_rating,
    set_search_term,
)


def _names(df: pd.DataFrame) -> list[str]:
    return df['customer_name'].tolist()


def test_no_filters_returns_all_accounts(companies) -> None:
    out = apply_filters(companies, FilterState())
    assert _names(out) == ['Company A', 'Company B', 'Company C', 'Company D']


def test_lob_then_party_type_narrow_with_and(companies) -> None:
    state = set_lob(FilterState(), ['LCB'])
    assert _names(apply_filters(companies, state)) == ['Company A', 'Company C']

    state = set_party_type(state, ['Corporate'])
    assert _names(apply_filters(companies, state)) == ['Company A']


def test_or_within_layer_and_between_layers(companies) -> None:
    state = set_party_type(set_lob(FilterState(), ['LCB', 'MCB']), ['Corporate'])
    out = apply_global_filters(companies, state)

    expected = companies[
        companies['line_of_business'].isin(['LCB', 'MCB']) & (companies['party_type'] == 'Corporate')
    ]
    assert out['account_id'].tolist() == expected['account_id'].tolist()


def test_rating_and_asset_class_layers(companies) -> None:
    out = apply_global_filters(companies, set_rating(FilterState(), ['AAA', 'AA']))
    assert _names(out) == ['Company A', 'Company B']

    out = apply_global_filters(companies, set_asset_classification(FilterState(), ['Delinquent']))
    assert _names(out) == ['Company C']


def test_filters_do_not_mutate_input(companies) -> None:
    before = companies.copy()
    state = set_search_term(set_lob(FilterState(), ['SCB']), 'telecom')
    out = apply_filters(companies, state)
    out.loc[out.index[0], 'customer_name'] = 'changed'
    pd.testing.assert_frame_equal(companies, before)


def test_no_match_returns_empty_frame(companies) -> None:
    out = apply_filters(companies, set_lob(FilterState(), ['XYZ']))
    assert out.empty
    assert list(out.columns) == list(companies.columns)


def test_drill_down_is_case_insensitive(companies) -> None:
    out = apply_drill_down_filter(companies, DrillDownFilter(field='region', value='east'))
    assert _names(out) == ['Company C']


def test_unknown_drill_down_field_fails_closed(companies) -> None:
    out = apply_drill_down_filter(companies, DrillDownFilter(field='removed_dimension', value='x'))
    assert out.empty


def test_page_filters_or_within_field_and_across_fields(companies) -> None:
    filters = [
        PageFilter(id='1', field='region', value='NORTH'),
        PageFilter(id='2', field='region', value='SOUTH'),
        PageFilter(id='3', field='segment', value='sme'),
    ]
    assert _names(apply_page_filters(companies, filters)) == ['Company B']
    assert _names(apply_page_filters(companies, filters[:2])) == ['Company A', 'Company B']


def test_unknown_page_filter_field_fails_closed(companies) -> None:
    out = apply_page_filters(companies, [PageFilter(id='1', field='old_field', value='x')])
    assert out.empty


def test_page_filters_only_apply_to_their_page(companies) -> None:
    state = add_page_filter(FilterState(), 'dashboard', PageFilter(id='1', field='region', value='WEST'))
    assert _names(apply_filters(companies, state, page='dashboard')) == ['Company D']
    assert len(apply_filters(companies, state, page='portfolio')) == 4
    assert len(apply_filters(companies, state)) == 4


def test_search_matches_name_id_group_and_industry(companies) -> None:
    assert _names(apply_search(companies, 'company c')) == ['Company C']
    assert _names(apply_search(companies, '1004')) == ['Company D']
    assert _names(apply_search(companies, 'GROUP B')) == ['Company B']
    assert _names(apply_search(companies, 'steel')) == ['Company C']
    assert len(apply_search(companies, '   ')) == 4


def test_layer_order_does_not_change_result(companies) -> None:
    state = FilterState()
    state = set_lob(state, ['LCB', 'MCB'])
    state = set_drill_down_filter(state, DrillDownFilter(field='credit_status', value='Standard'))
    state = add_page_filter(state, 'p', PageFilter(id='1', field='segment', value='CORPORATE'))
    state = set_search_term(state, 'company')

    layers = [
        lambda df: apply_global_filters(df, state),
        lambda df: apply_drill_down_filter(df, state.drill_down),
        lambda df: apply_page_filters(df, state.page_filters['p']),
        lambda df: apply_search(df, state.search_term),
    ]
    expected = apply_filters(companies, state, page='p')['account_id'].tolist()
    assert expected == ['company-1']

    for split in product([0, 1], repeat=len(layers)):
        first = [layer for layer, side in zip(layers, split) if side == 0]
        second = [layer for layer, side in zip(layers, split) if side == 1]
        out = companies
        for layer in second + first:
            out = layer(out)
        assert out['account_id'].tolist() == expected


def test_sort_accounts_handles_text_numbers_and_unknown(companies) -> None:
    assert _names(sort_accounts(companies, 'credit_exposure', 'desc')) == [
        'Company A',
        'Company C',
        'Company D',
        'Company B',
    ]
    assert _names(sort_accounts(companies, 'customer_name', 'desc'))[0] == 'Company D'
    assert _names(sort_accounts(companies, 'missing')) == _names(companies)


def test_unique_filter_values_sorted(companies, empty_accounts) -> None:
    out = unique_filter_values(companies)
    assert out['lob'] == ['LCB', 'MCB', 'SCB']
    assert out['party_type'] == ['Corporate', 'Large Corporate', 'SME']
    assert out['rating'] == ['A', 'AA', 'AAA', 'BBB']
    assert out['asset_classification'] == ['Delinquent', 'Standard']

    empty = unique_filter_values(empty_accounts)
    assert all(v == [] for v in empty.values())
