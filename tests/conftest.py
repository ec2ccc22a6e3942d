import pandas as pd
import pytest

from src.models.account import Account, accounts_to_frame


def _company(**overrides) -> Account:
    base = dict(
        account_id='company-0',
        customer_name='Company',
        cust_id=1000,
        party_type='Corporate',
        group='Group',
        org_structure='Bangalore LCB',
        line_of_business='LCB',
        industry='IT Services',
        product_type='Business Loan',
        region='NORTH',
        segment='CORPORATE',
        credit_limit=1000.0,
        gross_credit_exposure=900.0,
        credit_exposure=850.0,
        undrawn_exposure=150.0,
        overdues=0.0,
        credit_status='Standard',
        asset_class='Standard',
        borrower_external_rating='AAA',
        borrower_internal_rating='YLC3',
        borrower_credit_score=750.0,
        risk_grade='AAA',
        security_status='Secured',
        security_value=1000.0,
        stage_classification=1,
        state='California',
    )
    base.update(overrides)
    return Account(**base)


FOUR_COMPANIES = [
    _company(
        account_id='company-1',
        customer_name='Company A',
        cust_id=1001,
        group='Group A',
    ),
    _company(
        account_id='company-2',
        customer_name='Company B',
        cust_id=1002,
        party_type='SME',
        group='Group B',
        org_structure='Chennai MCB',
        line_of_business='MCB',
        industry='Logistics',
        product_type='Home Loan',
        region='SOUTH',
        segment='SME',
        credit_limit=500.0,
        gross_credit_exposure=450.0,
        credit_exposure=400.0,
        undrawn_exposure=100.0,
        overdues=15.0,
        credit_status='Watchlist',
        borrower_external_rating='AA',
        borrower_internal_rating='YMR1',
        borrower_credit_score=700.0,
        risk_grade='AA',
        security_value=500.0,
        state='Texas',
    ),
    _company(
        account_id='company-3',
        customer_name='Company C',
        cust_id=1003,
        party_type='Large Corporate',
        group='Group C',
        org_structure='Mumbai LCB',
        industry='Steel',
        product_type='Personal Loan',
        region='EAST',
        credit_limit=800.0,
        gross_credit_exposure=750.0,
        credit_exposure=700.0,
        undrawn_exposure=100.0,
        overdues=95.0,
        credit_status='Delinquent',
        asset_class='Delinquent',
        borrower_external_rating='BBB',
        borrower_internal_rating='YHR1',
        borrower_credit_score=650.0,
        risk_grade='BBB',
        security_status='Part Secured',
        security_value=400.0,
        stage_classification=2,
        state='New York',
    ),
    _company(
        account_id='company-4',
        customer_name='Company D',
        cust_id=1004,
        group='Group D',
        org_structure='Delhi LCB',
        line_of_business='SCB',
        industry='Telecom',
        product_type='Auto Loan',
        region='WEST',
        segment='RETAIL',
        credit_limit=600.0,
        gross_credit_exposure=550.0,
        credit_exposure=500.0,
        undrawn_exposure=100.0,
        borrower_external_rating='A',
        borrower_internal_rating='YLC5',
        borrower_credit_score=720.0,
        risk_grade='A',
        security_status='Clean',
        security_value=0.0,
        state='Florida',
    ),
]


@pytest.fixture
def make_account():
    return _company


@pytest.fixture
def companies() -> pd.DataFrame:
    return accounts_to_frame(FOUR_COMPANIES)


@pytest.fixture
def empty_accounts() -> pd.DataFrame:
    return accounts_to_frame([])
