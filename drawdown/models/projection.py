"""
Retirement drawdown projection engine.

This module turns a ProjectionParameters snapshot into a ProjectionResult by
walking the projection one year at a time: inflate the spending need, offset
it with external income, draw the remainder from the accounts in priority
order (tax-deferred, then tax-free, then taxable), pay flat-rate taxes, and
grow whatever is left.

The engine is a pure function. It keeps no state between calls and performs
no I/O beyond debug logging.
"""

import logging
from typing import List, Optional, Tuple

from .parameters import ProjectionParameters, validate_parameters
from .records import AccountBalances, ProjectionResult, WithdrawalBreakdown, YearRecord

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


def project(params: ProjectionParameters) -> ProjectionResult:
    """
    Project account balances, withdrawals and taxes year by year.

    Args:
        params: Projection assumptions

    Returns:
        ProjectionResult with exactly params.projection_years records

    Raises:
        ParameterError: If params fall outside the accepted domain
    """
    validate_parameters(params)

    logger.debug(
        f"Projecting {params.projection_years} years from a starting balance "
        f"of {params.total_starting_balance:.2f}"
    )

    balances = AccountBalances(
        tax_deferred=params.starting_tax_deferred_balance,
        tax_free=params.starting_tax_free_balance,
        taxable=params.starting_taxable_balance,
    )
    base_spend = params.initial_yearly_spend
    records: List[YearRecord] = []

    for year_index in range(params.projection_years):
        # The one-time addition never enters the compounding base
        if year_index > 0:
            base_spend *= 1 + params.annual_inflation_rate

        if balances.total <= 0:
            if not records or not records[-1].depleted:
                logger.debug(f"Funds depleted at year index {year_index}")
            records.append(_depleted_record(params, year_index))
            continue

        spending_need = base_spend
        if year_index == 0:
            spending_need += params.one_time_additional_spend

        record, balances = _project_year(
            params, year_index, balances, spending_need
        )
        records.append(record)

    return ProjectionResult(parameters=params, records=records)


def external_income_for_year(params: ProjectionParameters, year_index: int) -> float:
    """
    Get the external income received in a given year.

    Income is held flat in nominal terms unless params.income_inflation_adjusted
    is set, in which case it compounds with the inflation rate like spending.
    """
    if not params.income_inflation_adjusted:
        return params.annual_external_income
    return params.annual_external_income * (
        (1 + params.annual_inflation_rate) ** year_index
    )


def withdraw_in_priority_order(
    balances: AccountBalances, amount: float
) -> WithdrawalBreakdown:
    """
    Split a withdrawal across accounts: tax-deferred, then tax-free, then taxable.

    Each account supplies at most its own balance and at most what is still
    unmet, so the breakdown total is min(amount, balances.total).

    Args:
        balances: Balances available before the withdrawal
        amount: Amount to withdraw

    Returns:
        WithdrawalBreakdown with the amount taken from each account
    """
    remaining = max(0.0, amount)

    from_tax_deferred = min(remaining, balances.tax_deferred)
    remaining -= from_tax_deferred

    from_tax_free = 0.0
    if remaining > 0:
        from_tax_free = min(remaining, balances.tax_free)
        remaining -= from_tax_free

    from_taxable = 0.0
    if remaining > 0:
        from_taxable = min(remaining, balances.taxable)

    return WithdrawalBreakdown(
        tax_deferred=from_tax_deferred,
        tax_free=from_tax_free,
        taxable=from_taxable,
    )


def calculate_taxes(
    withdrawals: WithdrawalBreakdown, params: ProjectionParameters
) -> float:
    """Flat-rate tax owed on a year's withdrawals. Tax-free draws are untaxed."""
    return (
        withdrawals.tax_deferred * params.effective_tax_rate
        + withdrawals.taxable * params.taxable_account_tax_rate
    )


def apply_growth(balances: AccountBalances, rate: float) -> AccountBalances:
    """Grow each account balance independently by rate."""
    return AccountBalances(
        tax_deferred=balances.tax_deferred * (1 + rate),
        tax_free=balances.tax_free * (1 + rate),
        taxable=balances.taxable * (1 + rate),
    )


def _project_year(
    params: ProjectionParameters,
    year_index: int,
    balances: AccountBalances,
    spending_need: float,
) -> Tuple[YearRecord, AccountBalances]:
    """Run one active year. Returns the record and the balances carried forward."""
    income = external_income_for_year(params, year_index)
    net_cash_need = max(0.0, spending_need - income)
    beginning_total = balances.total

    shortfall = beginning_total < net_cash_need
    if not shortfall:
        withdrawals = withdraw_in_priority_order(balances, net_cash_need)
    elif params.allow_partial_withdrawal:
        withdrawals = WithdrawalBreakdown(
            tax_deferred=balances.tax_deferred,
            tax_free=balances.tax_free,
            taxable=balances.taxable,
        )
    else:
        withdrawals = WithdrawalBreakdown()

    gross_withdrawal = withdrawals.total
    taxes_paid = calculate_taxes(withdrawals, params)
    net_spending = gross_withdrawal - taxes_paid + income

    remaining = AccountBalances(
        tax_deferred=max(0.0, balances.tax_deferred - withdrawals.tax_deferred),
        tax_free=max(0.0, balances.tax_free - withdrawals.tax_free),
        taxable=max(0.0, balances.taxable - withdrawals.taxable),
    )
    ending = apply_growth(remaining, params.annual_return_rate)

    percent_withdrawn = 0.0
    if beginning_total > 0:
        percent_withdrawn = gross_withdrawal / beginning_total * 100

    record = YearRecord(
        year=_year_label(params, year_index),
        year_index=year_index,
        age=_age(params, year_index),
        spending_need=spending_need,
        external_income=income,
        net_cash_need=net_cash_need,
        beginning_total_balance=beginning_total,
        withdrawals=withdrawals,
        gross_withdrawal=gross_withdrawal,
        taxes_paid=taxes_paid,
        net_spending_available=max(0.0, net_spending),
        growth=remaining.total * params.annual_return_rate,
        ending_tax_deferred_balance=ending.tax_deferred,
        ending_tax_free_balance=ending.tax_free,
        ending_taxable_balance=ending.taxable,
        ending_total_balance=ending.total,
        percent_of_balance_withdrawn=percent_withdrawn,
        monthly_net_spending=max(0.0, net_spending) / MONTHS_PER_YEAR,
        shortfall=shortfall,
    )
    return record, ending


def _depleted_record(params: ProjectionParameters, year_index: int) -> YearRecord:
    """Zero-valued record for a year that starts with no money left."""
    return YearRecord(
        year=_year_label(params, year_index),
        year_index=year_index,
        age=_age(params, year_index),
        spending_need=0.0,
        external_income=0.0,
        net_cash_need=0.0,
        beginning_total_balance=0.0,
        gross_withdrawal=0.0,
        taxes_paid=0.0,
        net_spending_available=0.0,
        ending_tax_deferred_balance=0.0,
        ending_tax_free_balance=0.0,
        ending_taxable_balance=0.0,
        ending_total_balance=0.0,
        percent_of_balance_withdrawn=0.0,
        monthly_net_spending=0.0,
        depleted=True,
    )


def _year_label(params: ProjectionParameters, year_index: int) -> int:
    if params.start_year is None:
        return year_index
    return params.start_year + year_index


def _age(params: ProjectionParameters, year_index: int) -> Optional[int]:
    if params.current_age is None:
        return None
    return params.current_age + year_index
