"""
CAPM Report Module

Collects the regression, sample statistics and forecast scenario into a
single structured report and prints it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

import numpy as np

from config import TRADING_DAYS_PER_YEAR

from .capm_data import ReturnSeries
from .capm_estimator import RegressionResult, capm_expected_return
from .forecast import ForecastInputs, PredictionInterval


@dataclass(frozen=True)
class CapmReport:
    """Structured output of one CAPM analysis run (percent units throughout)."""

    asset: str
    market: str
    start_date: str
    end_date: str
    observations: int
    first_row_policy: str
    asset_annual_return: float
    asset_annual_volatility: float
    market_annual_return: float
    market_annual_volatility: float
    intercept: float
    beta: float
    residual_se: float
    r_squared: float
    beta_se: float
    beta_t_stat: float
    annual_alpha: float
    scenario_market_return: Optional[float] = None
    scenario_risk_free_rate: Optional[float] = None
    capm_expected_return: Optional[float] = None
    forecast: Optional[PredictionInterval] = None

    def to_dict(self) -> Dict:
        return asdict(self)


def annualised_mean(returns_pct, periods_per_year: int = TRADING_DAYS_PER_YEAR) -> float:
    """Arithmetic annualization of a daily percent return series."""
    return float(returns_pct.mean() * periods_per_year)


def annualised_volatility(
    returns_pct, periods_per_year: int = TRADING_DAYS_PER_YEAR
) -> float:
    """Annualized standard deviation of a daily percent return series."""
    return float(returns_pct.std() * np.sqrt(periods_per_year))


def generate_capm_report(
    returns: ReturnSeries,
    result: RegressionResult,
    inputs: Optional[ForecastInputs] = None,
    interval: Optional[PredictionInterval] = None,
    asset: str = "asset",
    market: str = "market",
) -> CapmReport:
    """
    Generates the CAPM analysis report.

    Args:
        returns: Return sample the regression was fitted on.
        result: Fitted regression.
        inputs: Optional forecast scenario.
        interval: Optional prediction interval for that scenario.
        asset: Label for the asset.
        market: Label for the market index.

    Returns:
        CapmReport.
    """
    frame = returns.frame

    scenario_market = None
    scenario_rf = None
    expected = None
    if inputs is not None:
        scenario_rf = inputs.risk_free_rate
        scenario_market = (
            inputs.market_excess_return * TRADING_DAYS_PER_YEAR + scenario_rf
        )
        expected = capm_expected_return(result.beta, scenario_market, scenario_rf)

    return CapmReport(
        asset=asset,
        market=market,
        start_date=str(returns.start.date()),
        end_date=str(returns.end.date()),
        observations=result.n,
        first_row_policy=returns.first_row_policy,
        asset_annual_return=annualised_mean(frame["asset_return"]),
        asset_annual_volatility=annualised_volatility(frame["asset_return"]),
        market_annual_return=annualised_mean(frame["market_return"]),
        market_annual_volatility=annualised_volatility(frame["market_return"]),
        intercept=result.intercept,
        beta=result.beta,
        residual_se=result.residual_se,
        r_squared=result.r_squared,
        beta_se=result.beta_se,
        beta_t_stat=float(result.beta_t_stat),
        annual_alpha=result.intercept * TRADING_DAYS_PER_YEAR,
        scenario_market_return=scenario_market,
        scenario_risk_free_rate=scenario_rf,
        capm_expected_return=expected,
        forecast=interval,
    )


def print_capm_report(report: CapmReport):
    """
    Prints a formatted CAPM report.

    Args:
        report: Report produced by generate_capm_report.
    """
    print("\n" + "=" * 60)
    print(f"CAPM REPORT: {report.asset} vs {report.market}")
    print("=" * 60)

    print("\nSample:")
    print(f"  Period:                 {report.start_date} to {report.end_date}")
    print(f"  Observations:           {report.observations:>12d}")
    print(f"  First Row Policy:       {report.first_row_policy:>12}")

    print("\nReturn Statistics (annualized):")
    print(f"  Asset Mean Return:      {report.asset_annual_return:>11.2f}%")
    print(f"  Asset Volatility:       {report.asset_annual_volatility:>11.2f}%")
    print(f"  Market Mean Return:     {report.market_annual_return:>11.2f}%")
    print(f"  Market Volatility:      {report.market_annual_volatility:>11.2f}%")

    print("\nRegression (daily excess returns):")
    print(f"  Intercept:              {report.intercept:>12.6f}")
    print(f"  Beta:                   {report.beta:>12.4f}")
    print(f"  Beta Std. Error:        {report.beta_se:>12.4f}")
    print(f"  Beta t-stat:            {report.beta_t_stat:>12.2f}")
    print(f"  Residual Std. Error:    {report.residual_se:>12.6f}")
    print(f"  R-squared:              {report.r_squared:>12.4f}")
    print(f"  Alpha (annualized):     {report.annual_alpha:>11.2f}%")

    if report.forecast is not None:
        forecast = report.forecast
        print("\nForecast Scenario (annualized total return):")
        print(f"  Market Return:          {report.scenario_market_return:>11.2f}%")
        print(f"  Risk-Free Rate:         {report.scenario_risk_free_rate:>11.2f}%")
        print(f"  CAPM Expected Return:   {report.capm_expected_return:>11.2f}%")
        print(f"  Point Forecast:         {forecast.point:>11.2f}%")
        print(f"  {forecast.confidence:.0%} Interval Lower:     {forecast.lower:>11.2f}%")
        print(f"  {forecast.confidence:.0%} Interval Upper:     {forecast.upper:>11.2f}%")
        print(f"  t Critical Value:       {forecast.t_critical:>12.4f}")
        print(f"  Degrees of Freedom:     {forecast.degrees_of_freedom:>12d}")

    print("\n" + "=" * 60 + "\n")


__all__ = [
    "CapmReport",
    "annualised_mean",
    "annualised_volatility",
    "generate_capm_report",
    "print_capm_report",
]
