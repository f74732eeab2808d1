"""
CAPM Data Utilities
===================

Helper functions to pull and prepare the data required for
Capital Asset Pricing Model (CAPM) regressions: price and risk-free
rate sources, date alignment, and daily return construction.

All returns produced here are expressed in percent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import yfinance as yf

from config import (
    DEFAULT_MARKET_TICKER,
    DEFAULT_RISK_FREE_TICKER,
    DEFAULT_START_DATE,
    FIRST_ROW_POLICY,
    RISK_FREE_DAYS_PER_YEAR,
)

from .errors import InsufficientDataError, MisalignedSeriesError

logger = logging.getLogger(__name__)

FIRST_ROW_POLICIES = ("drop", "zero")

RETURN_COLUMNS = [
    "asset_return",
    "market_return",
    "rf_return",
    "asset_excess",
    "market_excess",
]


@dataclass(frozen=True)
class ReturnSeries:
    """
    Joined daily return table used as the regression sample.

    Attributes:
        frame: DataFrame indexed by date (ascending) with the columns
            asset_return, market_return, rf_return, asset_excess and
            market_excess, all in percent.
        risk_free_rates: Annual risk-free rate (percent) aligned to the
            same dates, after forward filling.
        first_row_policy: "drop" if the first (return-less) row was omitted,
            "zero" if it was kept with zero-filled returns.
    """

    frame: pd.DataFrame
    risk_free_rates: pd.Series
    first_row_policy: str = FIRST_ROW_POLICY

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def start(self) -> pd.Timestamp:
        return self.frame.index[0]

    @property
    def end(self) -> pd.Timestamp:
        return self.frame.index[-1]

    @property
    def asset_excess(self) -> pd.Series:
        return self.frame["asset_excess"]

    @property
    def market_excess(self) -> pd.Series:
        return self.frame["market_excess"]


def daily_risk_free_rate(annual_rate_pct):
    """
    Convert an annualized risk-free rate in percent to a daily rate in percent.

    Uses 360-day compounding: ((1 + R/100) ** (1/360) - 1) * 100.
    Works element-wise on floats, numpy arrays and pandas objects.
    """

    return ((1 + annual_rate_pct / 100) ** (1 / RISK_FREE_DAYS_PER_YEAR) - 1) * 100


def annualise_daily_rate(daily_rate_pct):
    """Inverse of daily_risk_free_rate: ((1 + d/100) ** 360 - 1) * 100."""

    return ((1 + daily_rate_pct / 100) ** RISK_FREE_DAYS_PER_YEAR - 1) * 100


def compute_returns(prices: pd.Series) -> pd.Series:
    """
    Convert a price series to daily simple returns in percent.

    Args:
        prices: Price series indexed by date (ascending).

    Returns:
        Series of (p[i] - p[i-1]) / p[i-1] * 100; the first value is NaN.
    """

    previous = prices.shift(1)
    return (prices - previous) / previous * 100


def _prepare_series(data: pd.Series, label: str) -> pd.Series:
    """Coerce a date-indexed series to float values on a sorted, tz-naive index."""

    if not isinstance(data, pd.Series):
        raise TypeError(f"{label} must be a pandas Series, got {type(data).__name__}")

    series = data.astype(float).copy()
    index = pd.DatetimeIndex(pd.to_datetime(series.index))
    if index.tz is not None:
        index = index.tz_localize(None)
    series.index = index

    if series.index.has_duplicates:
        duplicated = series.index[series.index.duplicated()][0]
        raise MisalignedSeriesError(
            f"{label} series has duplicate date {duplicated.date()}"
        )

    return series.sort_index().dropna()


def align_series(
    asset_prices: pd.Series,
    market_prices: pd.Series,
    risk_free_rates: pd.Series,
) -> pd.DataFrame:
    """
    Join asset, market and risk-free series onto a common trading calendar.

    Asset and market prices are inner-joined on date. The risk-free rate is
    forward-filled onto those dates: each trading day takes the most recent
    rate observed at or before it.

    Args:
        asset_prices: Asset closing prices indexed by date.
        market_prices: Market index closing prices indexed by date.
        risk_free_rates: Annualized risk-free rate in percent, indexed by date.

    Returns:
        DataFrame with columns asset_price, market_price, risk_free_rate.

    Raises:
        MisalignedSeriesError: If asset and market dates do not overlap.
        InsufficientDataError: If a trading day has no prior risk-free value.
    """

    asset = _prepare_series(asset_prices, "asset")
    market = _prepare_series(market_prices, "market")
    rates = _prepare_series(risk_free_rates, "risk-free")

    if (asset <= 0).any() or (market <= 0).any():
        raise ValueError("Prices must be strictly positive.")

    aligned = pd.concat(
        [asset.rename("asset_price"), market.rename("market_price")],
        axis=1,
        join="inner",
    )
    if aligned.empty:
        raise MisalignedSeriesError("Asset and market series share no dates.")

    calendar = rates.index.union(aligned.index)
    aligned["risk_free_rate"] = rates.reindex(calendar).ffill().reindex(aligned.index)

    missing = aligned["risk_free_rate"].isna()
    if missing.any():
        first_gap = aligned.index[missing][0]
        raise InsufficientDataError(
            f"No risk-free observation at or before {first_gap.date()}"
        )

    logger.debug(
        f"[CapmData] Aligned {len(aligned)} rows "
        f"({len(asset)} asset, {len(market)} market, {len(rates)} rate observations)"
    )
    return aligned


def build_return_series(
    asset_prices: pd.Series,
    market_prices: pd.Series,
    risk_free_rates: pd.Series,
    first_row: str = FIRST_ROW_POLICY,
) -> ReturnSeries:
    """
    Build the daily return table used by the CAPM regression.

    Args:
        asset_prices: Asset closing prices indexed by date.
        market_prices: Market index closing prices indexed by date.
        risk_free_rates: Annualized risk-free rate in percent, indexed by date.
        first_row: "drop" omits the first date (it has no prior price);
            "zero" keeps it with every return column set to zero.

    Returns:
        ReturnSeries ordered by date ascending.
    """

    if first_row not in FIRST_ROW_POLICIES:
        raise ValueError(
            f"first_row must be one of {FIRST_ROW_POLICIES}, got {first_row!r}"
        )

    aligned = align_series(asset_prices, market_prices, risk_free_rates)
    if len(aligned) < 2:
        raise InsufficientDataError(
            f"Need at least 2 aligned price rows to compute returns, got {len(aligned)}"
        )

    frame = pd.DataFrame(index=aligned.index)
    frame["asset_return"] = compute_returns(aligned["asset_price"])
    frame["market_return"] = compute_returns(aligned["market_price"])
    frame["rf_return"] = daily_risk_free_rate(aligned["risk_free_rate"])
    frame["asset_excess"] = frame["asset_return"] - frame["rf_return"]
    frame["market_excess"] = frame["market_return"] - frame["rf_return"]

    rates = aligned["risk_free_rate"]
    if first_row == "drop":
        frame = frame.iloc[1:]
        rates = rates.iloc[1:]
    else:
        frame.iloc[0] = 0.0

    frame.index.name = "date"
    logger.info(
        f"[CapmData] Built {len(frame)} return rows "
        f"from {frame.index[0].date()} to {frame.index[-1].date()} "
        f"(first row policy: {first_row})"
    )
    return ReturnSeries(
        frame=frame[RETURN_COLUMNS],
        risk_free_rates=rates,
        first_row_policy=first_row,
    )


def fetch_price_data(
    ticker: str,
    start_date: str,
    end_date: Optional[str] = None,
    adjust: bool = True,
) -> pd.Series:
    """
    Download a daily closing price series for a ticker using yfinance.

    Args:
        ticker: Ticker symbol.
        start_date: Start of historical window (YYYY-MM-DD).
        end_date: Optional end of window; defaults to latest available date.
        adjust: Whether to use split/dividend adjusted closes.

    Returns:
        Series of closing values indexed by date.
    """

    logger.info(f"[CapmData] Downloading {ticker} from {start_date} to {end_date or 'today'}")
    download = yf.download(
        tickers=ticker,
        start=start_date,
        end=end_date,
        progress=False,
        auto_adjust=adjust,
    )

    if download is None or download.empty:
        raise InsufficientDataError(f"No data returned for {ticker}")

    close = download["Close"]
    # yfinance returns a (field, ticker) column MultiIndex even for one ticker.
    if isinstance(close, pd.DataFrame):
        close = close[ticker] if ticker in close.columns else close.iloc[:, 0]

    return close.dropna().rename(ticker)


def fetch_risk_free_rate(
    ticker: str = DEFAULT_RISK_FREE_TICKER,
    start_date: str = DEFAULT_START_DATE,
    end_date: Optional[str] = None,
) -> pd.Series:
    """
    Download an annualized risk-free yield series (percent) using yfinance.

    The default ticker (^IRX, 13-week T-bill) is already quoted in percent.
    """

    return fetch_price_data(ticker, start_date, end_date, adjust=False)


def load_series_csv(
    path: Union[str, Path],
    value_column: Optional[str] = None,
) -> pd.Series:
    """
    Load a date-indexed series from a CSV file.

    The first column is parsed as the date. FRED-style "." placeholders are
    treated as missing and dropped.

    Args:
        path: CSV file path.
        value_column: Column holding the values; defaults to the first
            non-date column.

    Returns:
        Float series indexed by date.
    """

    frame = pd.read_csv(path, index_col=0, parse_dates=True, na_values=["."])
    if frame.empty or len(frame.columns) == 0:
        raise InsufficientDataError(f"No data rows in {path}")

    column = value_column or frame.columns[0]
    if column not in frame.columns:
        raise KeyError(f"Column {column!r} not found in {path}")

    series = frame[column].astype(float).dropna()
    series.index.name = "date"
    logger.debug(f"[CapmData] Loaded {len(series)} rows from {path}")
    return series.rename(Path(path).stem)


def prepare_capm_dataset(
    asset_ticker: str,
    market_ticker: str = DEFAULT_MARKET_TICKER,
    risk_free_ticker: str = DEFAULT_RISK_FREE_TICKER,
    start_date: str = DEFAULT_START_DATE,
    end_date: Optional[str] = None,
    first_row: str = FIRST_ROW_POLICY,
) -> ReturnSeries:
    """
    Pull and align asset, market and risk-free data ready for CAPM regression.

    Args:
        asset_ticker: Stock ticker.
        market_ticker: Market benchmark (default S&P 500).
        risk_free_ticker: Annualized risk-free yield ticker, in percent.
        start_date: Start of historical window.
        end_date: Optional end date.
        first_row: First-row policy passed to build_return_series.

    Returns:
        ReturnSeries containing aligned daily returns.
    """

    asset_prices = fetch_price_data(asset_ticker, start_date, end_date)
    market_prices = fetch_price_data(market_ticker, start_date, end_date)
    rates = fetch_risk_free_rate(risk_free_ticker, start_date, end_date)

    return build_return_series(asset_prices, market_prices, rates, first_row=first_row)


__all__ = [
    "ReturnSeries",
    "align_series",
    "annualise_daily_rate",
    "build_return_series",
    "compute_returns",
    "daily_risk_free_rate",
    "fetch_price_data",
    "fetch_risk_free_rate",
    "load_series_csv",
    "prepare_capm_dataset",
]
