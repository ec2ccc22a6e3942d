"""Input data validation for the account collection."""

from __future__ import annotations

import pandas as pd

ACCOUNT_REQUIRED_COLUMNS = [
    'account_id',
    'customer_name',
    'region',
    'product_type',
    'line_of_business',
    'party_type',
    'borrower_external_rating',
    'credit_status',
    'asset_class',
    'credit_limit',
    'credit_exposure',
    'overdues',
    'security_value',
    'borrower_credit_score',
]

ACCOUNT_NUMERIC_COLUMNS = [
    'credit_limit',
    'gross_credit_exposure',
    'credit_exposure',
    'undrawn_exposure',
    'overdues',
    'security_value',
    'borrower_credit_score',
]


def _missing_columns(df: pd.DataFrame, required: list[str]) -> list[str]:
    cols = set(df.columns)
    return [col for col in required if col not in cols]


def validate_accounts(df: pd.DataFrame) -> list[str]:
    """Validate normalized account data and return non-fatal warnings."""
    missing = _missing_columns(df, ACCOUNT_REQUIRED_COLUMNS)
    if missing:
        raise ValueError(f'Missing required account columns: {missing}')

    warnings: list[str] = []

    if df['account_id'].duplicated().any():
        raise ValueError('Duplicate account_id values found.')

    for col in ACCOUNT_NUMERIC_COLUMNS:
        if col not in df.columns:
            continue
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise ValueError(f'Column {col} must be numeric dtype.')

    if df[ACCOUNT_REQUIRED_COLUMNS].isna().any().any():
        raise ValueError('Accounts contain nulls in required columns.')

    over_limit = int((df['credit_exposure'] > df['credit_limit']).sum())
    if over_limit:
        warnings.append(f'{over_limit} accounts have credit_exposure above credit_limit.')

    if 'gross_credit_exposure' in df.columns:
        below_net = int((df['gross_credit_exposure'] < df['credit_exposure']).sum())
        if below_net:
            warnings.append(f'{below_net} accounts have gross_credit_exposure below credit_exposure.')

    negative_dpd = int((df['overdues'] < 0).sum())
    if negative_dpd:
        warnings.append(f'{negative_dpd} accounts have negative overdue days and are treated as current.')

    zero_limit = int((df['credit_limit'] == 0).sum())
    if zero_limit:
        warnings.append(f'{zero_limit} accounts have zero credit_limit.')

    return warnings
