"""
CAPM Package
============

Return series construction, CAPM beta estimation and prediction
intervals for a single stock against a market index.
"""

from .capm_data import (
    ReturnSeries,
    align_series,
    annualise_daily_rate,
    build_return_series,
    compute_returns,
    daily_risk_free_rate,
    fetch_price_data,
    fetch_risk_free_rate,
    load_series_csv,
    prepare_capm_dataset,
)
from .capm_estimator import RegressionResult, capm_expected_return, fit_capm
from .errors import (
    CapmError,
    DegenerateRegressionError,
    InsufficientDataError,
    InvalidConfidenceError,
    MisalignedSeriesError,
)
from .forecast import (
    ForecastInputs,
    PredictionInterval,
    prediction_interval,
    t_critical_value,
)
from .report import CapmReport, generate_capm_report, print_capm_report

__all__ = [
    "CapmError",
    "CapmReport",
    "DegenerateRegressionError",
    "ForecastInputs",
    "InsufficientDataError",
    "InvalidConfidenceError",
    "MisalignedSeriesError",
    "PredictionInterval",
    "RegressionResult",
    "ReturnSeries",
    "align_series",
    "annualise_daily_rate",
    "build_return_series",
    "capm_expected_return",
    "compute_returns",
    "daily_risk_free_rate",
    "fetch_price_data",
    "fetch_risk_free_rate",
    "fit_capm",
    "generate_capm_report",
    "load_series_csv",
    "prediction_interval",
    "prepare_capm_dataset",
    "print_capm_report",
    "t_critical_value",
]
