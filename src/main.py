"""
CAPM Forecast - Main Entry Point

This script runs the CAPM analysis for a single stock:
1. Loading asset, market and risk-free series (yfinance or local CSVs).
2. Building daily excess returns.
3. Fitting the CAPM regression.
4. Computing the prediction interval for a market scenario.
5. Printing the report.
"""

import argparse
import logging
import sys
from pathlib import Path

from capm import (
    CapmError,
    ForecastInputs,
    build_return_series,
    fit_capm,
    generate_capm_report,
    load_series_csv,
    prediction_interval,
    prepare_capm_dataset,
    print_capm_report,
)
from config import (
    DEFAULT_ASSET_TICKER,
    DEFAULT_CONFIDENCE,
    DEFAULT_MARKET_TICKER,
    DEFAULT_RISK_FREE_TICKER,
    DEFAULT_START_DATE,
    FIRST_ROW_POLICY,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate CAPM beta and a prediction interval for annual returns"
    )
    parser.add_argument(
        "--asset",
        default=None,
        help="Stock ticker (default: CSV file name or configured ticker)",
    )
    parser.add_argument(
        "--market",
        default=None,
        help="Market index ticker (default: CSV file name or configured ticker)",
    )
    parser.add_argument(
        "--risk-free-ticker",
        default=DEFAULT_RISK_FREE_TICKER,
        help="Annualized risk-free yield ticker (percent)",
    )
    parser.add_argument("--start", default=DEFAULT_START_DATE, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", default=None, help="End date (YYYY-MM-DD)")
    parser.add_argument("--asset-csv", help="Local CSV (date,price) for the asset")
    parser.add_argument("--market-csv", help="Local CSV (date,price) for the market")
    parser.add_argument("--rate-csv", help="Local CSV (date,rate%%) for the risk-free rate")
    parser.add_argument(
        "--first-row",
        choices=["drop", "zero"],
        default=FIRST_ROW_POLICY,
        help="Drop the first return row or zero-fill it",
    )
    parser.add_argument(
        "--market-return",
        type=float,
        default=None,
        help="Scenario annual market return in percent",
    )
    parser.add_argument(
        "--risk-free",
        type=float,
        default=None,
        help="Scenario annual risk-free rate in percent (default: last observed)",
    )
    parser.add_argument(
        "--confidence", type=float, default=DEFAULT_CONFIDENCE, help="Confidence level"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def load_returns(args):
    """Build the return series from local CSVs when given, otherwise yfinance."""
    csv_paths = [args.asset_csv, args.market_csv, args.rate_csv]
    if all(csv_paths):
        logger.info("[Main] Loading series from CSV files")
        return build_return_series(
            load_series_csv(args.asset_csv),
            load_series_csv(args.market_csv),
            load_series_csv(args.rate_csv),
            first_row=args.first_row,
        )

    return prepare_capm_dataset(
        asset_ticker=args.asset,
        market_ticker=args.market,
        risk_free_ticker=args.risk_free_ticker,
        start_date=args.start,
        end_date=args.end,
        first_row=args.first_row,
    )


def run_capm_analysis(args) -> int:
    """
    Runs the CAPM analysis and prints the report.

    Returns:
        Process exit code.
    """
    print("\n" + "=" * 70)
    print("CAPM BETA ESTIMATION & PREDICTION INTERVAL")
    print("=" * 70)

    try:
        returns = load_returns(args)
        result = fit_capm(returns)

        inputs = None
        interval = None
        if args.market_return is not None:
            risk_free = args.risk_free
            if risk_free is None:
                risk_free = float(returns.risk_free_rates.iloc[-1])
            inputs = ForecastInputs.from_annual(
                market_return=args.market_return,
                risk_free_rate=risk_free,
                confidence=args.confidence,
            )
            interval = prediction_interval(result, inputs)

        report = generate_capm_report(
            returns,
            result,
            inputs=inputs,
            interval=interval,
            asset=args.asset,
            market=args.market,
        )
        print_capm_report(report)

    except CapmError as e:
        print(f"\nERROR: {e}")
        return 1
    except FileNotFoundError as e:
        print(f"\nERROR: {e.filename} not found.")
        return 1
    except (ValueError, KeyError) as e:
        print(f"\nERROR: Invalid input data: {e}")
        return 1
    except Exception as e:
        print(f"\nAn error occurred during CAPM analysis: {e}")
        import traceback

        traceback.print_exc()
        return 1

    return 0


def main(argv=None) -> int:
    """
    Main execution block
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    csv_paths = [args.asset_csv, args.market_csv, args.rate_csv]
    if any(csv_paths) and not all(csv_paths):
        parser.error("--asset-csv, --market-csv and --rate-csv must be given together")
    if args.asset is None:
        args.asset = Path(args.asset_csv).stem if args.asset_csv else DEFAULT_ASSET_TICKER
    if args.market is None:
        args.market = Path(args.market_csv).stem if args.market_csv else DEFAULT_MARKET_TICKER

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run_capm_analysis(args)


if __name__ == "__main__":
    sys.exit(main())
