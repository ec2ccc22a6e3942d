"""Account workbook/CSV loader and schema normalization."""

from __future__ import annotations

from pathlib import Path
import re

import pandas as pd

from src.data.validator import ACCOUNT_NUMERIC_COLUMNS, validate_accounts
from src.models.account import ACCOUNT_COLUMNS, CATEGORICAL_COLUMNS
from src.utils.logging import get_logger

LOGGER = get_logger(__name__)

ACCOUNTS_SHEET = 'Accounts'

ACCOUNT_COLUMN_MAP = {
    'id': 'account_id',
    'asset_classification': 'asset_class',
    'lob': 'line_of_business',
    'rating': 'borrower_external_rating',
    'external_rating': 'borrower_external_rating',
    'internal_rating': 'borrower_internal_rating',
    'credit_score': 'borrower_credit_score',
    'dpd': 'overdues',
    'days_past_due': 'overdues',
}

OPTIONAL_DEFAULTS = {
    'gross_credit_exposure': None,
    'undrawn_exposure': 0.0,
    'stage_classification': 1,
    'parent_id': None,
}


def _snake_case(name: str) -> str:
    text = str(name).strip()
    text = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', text)
    text = re.sub(r'[^A-Za-z0-9]+', '_', text)
    return text.strip('_').lower()


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out.columns = [_snake_case(c) for c in out.columns]
    return out.rename(columns=ACCOUNT_COLUMN_MAP)


def _read_raw(path: str) -> pd.DataFrame:
    suffix = Path(path).suffix.lower()
    if suffix == '.csv':
        return pd.read_csv(path)
    return pd.read_excel(path, sheet_name=ACCOUNTS_SHEET)


def normalize_accounts(raw: pd.DataFrame) -> pd.DataFrame:
    """Rename, fill, and coerce a raw account table into the engine schema."""
    accounts = _normalize_columns(raw)

    for col in CATEGORICAL_COLUMNS:
        if col not in accounts.columns:
            accounts[col] = ''
        accounts[col] = accounts[col].fillna('').astype(str).str.strip()
        accounts.loc[accounts[col].isin(['nan', 'None']), col] = ''

    for col in ACCOUNT_NUMERIC_COLUMNS + ['stage_classification']:
        if col in accounts.columns:
            accounts[col] = pd.to_numeric(accounts[col])

    if 'gross_credit_exposure' not in accounts.columns and 'credit_exposure' in accounts.columns:
        accounts['gross_credit_exposure'] = accounts['credit_exposure']
    for col, default in OPTIONAL_DEFAULTS.items():
        if col not in accounts.columns:
            accounts[col] = default

    if 'account_id' in accounts.columns:
        accounts['account_id'] = accounts['account_id'].astype(str).str.strip()
    if 'cust_id' not in accounts.columns:
        accounts['cust_id'] = range(1, len(accounts) + 1)

    ordered = [c for c in ACCOUNT_COLUMNS if c in accounts.columns]
    extras = [c for c in accounts.columns if c not in ordered]
    return accounts[ordered + extras].reset_index(drop=True)


def load_accounts(path: str) -> pd.DataFrame:
    """Load, normalize, and validate the account collection from xlsx or csv."""
    accounts = normalize_accounts(_read_raw(path))

    for warning in validate_accounts(accounts):
        LOGGER.warning(warning)

    LOGGER.info('Loaded %s accounts from %s.', len(accounts), path)
    return accounts
