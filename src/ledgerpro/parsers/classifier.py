"""Keyword classification of extracted document lines into ledger categories."""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from ledgerpro.core.models import AccountType, ZERO, to_decimal

logger = logging.getLogger(__name__)

# Optional "$", optional whitespace, digits with thousands commas, optional cents
AMOUNT_PATTERN = re.compile(r'\$?\s*\d[\d,]*(?:\.\d{2})?')

MIN_AMOUNT = Decimal("1")
MIN_DESCRIPTION_LENGTH = 4
DESCRIPTION_LIMIT = 60

ASSET_KEYWORDS = [
    'cash',
    'bank',
    'receivable',
    'inventory',
    'equipment',
    'asset',
    'prepaid',
    'investment',
    'property',
]

LIABILITY_KEYWORDS = [
    'payable',
    'loan',
    'debt',
    'liability',
    'liabilities',
    'credit',
    'note payable',
    'mortgage',
]

REVENUE_KEYWORDS = [
    'revenue',
    'income',
    'sales',
    'service',
    'earning',
    'gain',
]

EXPENSE_KEYWORDS = [
    'expense',
    'cost',
    'salary',
    'salaries',
    'wages',
    'rent',
    'utility',
    'utilities',
    'depreciation',
    'insurance',
    'advertising',
    'fee',
]

# Checked in this order; first match wins
CATEGORY_KEYWORDS: List[Tuple[AccountType, List[str]]] = [
    (AccountType.ASSET, ASSET_KEYWORDS),
    (AccountType.LIABILITY, LIABILITY_KEYWORDS),
    (AccountType.REVENUE, REVENUE_KEYWORDS),
    (AccountType.EXPENSE, EXPENSE_KEYWORDS),
]


@dataclass
class ClassifiedItem:
    """A monetary line item recognised in document text."""
    description: str
    amount: Decimal
    category: AccountType
    original_line: str


def extract_amount(line: str) -> Optional[Decimal]:
    """
    Return the last currency-like token on the line as a Decimal.

    Examples:
        >>> extract_amount("Office Rent Expense $1,250.00")
        Decimal('1250.00')

        >>> extract_amount("Invoice 1001 Consulting Service 300")
        Decimal('300')
    """
    tokens = AMOUNT_PATTERN.findall(line)
    if not tokens:
        return None
    return to_decimal(tokens[-1].replace('$', '').strip())


def classify_line(line: str) -> Optional[AccountType]:
    """
    Pick a category by keyword, checking Asset, Liability, Revenue and
    Expense keywords in that order.

    Args:
        line: Raw text line

    Returns:
        AccountType, or None when no keyword matches
    """
    lowered = line.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in lowered:
                return category
    return None


def clean_description(line: str) -> str:
    """Strip amount tokens and collapse whitespace."""
    stripped = AMOUNT_PATTERN.sub('', line)
    return re.sub(r'\s+', ' ', stripped).strip()


def classify(text: str) -> List[ClassifiedItem]:
    """
    Turn extracted document text into categorised line items.

    A line is kept only if it has an amount token, matches a category
    keyword, its amount is at least 1, and its description is longer than
    three characters once amounts are stripped.

    Examples:
        >>> classify("Office Rent Expense $1,250.00")[0].category
        <AccountType.EXPENSE: 'Expense'>
    """
    items: List[ClassifiedItem] = []
    if not text:
        return items

    for raw in text.split('\n'):
        line = raw.strip()
        if not line:
            continue

        amount = extract_amount(line)
        if amount is None:
            continue

        category = classify_line(line)
        if category is None:
            logger.debug(f"No category keyword in line: {line!r}")
            continue

        if amount <= ZERO or amount < MIN_AMOUNT:
            logger.debug(f"Amount below threshold in line: {line!r}")
            continue

        description = clean_description(line)
        if len(description) < MIN_DESCRIPTION_LENGTH:
            logger.debug(f"Description too short in line: {line!r}")
            continue

        items.append(ClassifiedItem(
            description=description[:DESCRIPTION_LIMIT],
            amount=amount,
            category=category,
            original_line=line,
        ))

    return items
