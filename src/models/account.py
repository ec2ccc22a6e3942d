"""Account domain model and frame conversion helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields

import pandas as pd

EXPOSURE_SCALE = 1_000_000


@dataclass(frozen=True)
class Account:
    """One credit exposure. Monetary fields are in crore units."""

    account_id: str
    customer_name: str
    cust_id: int
    party_type: str
    group: str
    org_structure: str
    line_of_business: str
    industry: str
    product_type: str
    region: str
    segment: str
    credit_limit: float
    gross_credit_exposure: float
    credit_exposure: float
    undrawn_exposure: float
    overdues: float
    credit_status: str
    asset_class: str
    borrower_external_rating: str
    borrower_internal_rating: str
    borrower_credit_score: float
    risk_grade: str
    security_status: str
    security_value: float
    stage_classification: int = 1
    state: str = ''
    parent_id: str | None = None


ACCOUNT_COLUMNS = [f.name for f in fields(Account)]

CATEGORICAL_COLUMNS = [
    'party_type',
    'group',
    'org_structure',
    'line_of_business',
    'industry',
    'product_type',
    'region',
    'segment',
    'state',
    'credit_status',
    'asset_class',
    'borrower_external_rating',
    'borrower_internal_rating',
    'risk_grade',
    'security_status',
]

NUMERIC_COLUMNS = [
    'credit_limit',
    'gross_credit_exposure',
    'credit_exposure',
    'undrawn_exposure',
    'overdues',
    'borrower_credit_score',
    'security_value',
    'stage_classification',
]


def accounts_to_frame(accounts: list[Account]) -> pd.DataFrame:
    """Build the account collection frame, preserving input order."""
    if not accounts:
        return pd.DataFrame(columns=ACCOUNT_COLUMNS)
    return pd.DataFrame([asdict(a) for a in accounts], columns=ACCOUNT_COLUMNS)


def frame_to_accounts(accounts_df: pd.DataFrame) -> list[Account]:
    """Convert frame rows back into immutable account records."""
    out: list[Account] = []
    for record in accounts_df[ACCOUNT_COLUMNS].to_dict(orient='records'):
        parent = record.get('parent_id')
        record['parent_id'] = None if parent is None or pd.isna(parent) else str(parent)
        out.append(Account(**record))
    return out


def scaled_exposure(accounts_df: pd.DataFrame) -> pd.Series:
    """Credit exposure converted from crore units to currency."""
    return accounts_df['credit_exposure'].astype(float) * EXPOSURE_SCALE
