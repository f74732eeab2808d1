"""
Configuration Module

This file stores static configuration variables for the CAPM toolkit.
Tickers and the start date can be overridden from the environment or a
.env file in the project root.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# Default analysis universe
DEFAULT_ASSET_TICKER = os.getenv("CAPM_ASSET_TICKER", "AAPL")
DEFAULT_MARKET_TICKER = os.getenv("CAPM_MARKET_TICKER", "^GSPC")

# 13-week T-bill yield, quoted as an annual percentage
DEFAULT_RISK_FREE_TICKER = os.getenv("CAPM_RISK_FREE_TICKER", "^IRX")

# Default analysis start date
DEFAULT_START_DATE = os.getenv("CAPM_START_DATE", "2019-01-01")

# Trading days per year for annualization
TRADING_DAYS_PER_YEAR = 252

# Day-count used to de-annualize the risk-free rate (money-market convention)
RISK_FREE_DAYS_PER_YEAR = 360

# Default confidence level for prediction intervals
DEFAULT_CONFIDENCE = 0.90

# How the first return row (no prior price) is handled: "drop" or "zero"
FIRST_ROW_POLICY = "drop"
