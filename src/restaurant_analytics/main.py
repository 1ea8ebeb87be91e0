"""
Command line entry point: fetch the collections and print the analytics reports.
"""
import json
import logging
import argparse
import time
import traceback
from datetime import datetime
from restaurant_analytics.config import Config
from restaurant_analytics.ingestion.loader import create_repository, fetch_collections
from restaurant_analytics.ingestion.quality import run_data_quality_checks
from restaurant_analytics.analytics.reports import build_analytics_report

logger = logging.getLogger(__name__)


def run_report(config_file='config.ini', source=None, days=None, top=None, quality_check=None,
               now=None, repository=None):
    start_time = time.time()
    statistics = {
        'start_time': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        'status': 'failed',
        'stages': {},
    }

    try:
        logger.info("Starting analytics report")

        # Load configuration
        config = Config(config_file)

        # Override config settings if provided
        if source is not None:
            config.config['ANALYTICS']['source'] = source
        if days is not None:
            config.config['ANALYTICS']['days'] = str(days)
        if top is not None:
            config.config['ANALYTICS']['top_foods'] = str(top)
        if quality_check is not None:
            config.config['ANALYTICS']['quality_check'] = str(quality_check).lower()

        run_quality_check = config.is_quality_check_enabled()
        timezone = config.get_timezone()

        # ---- Data fetch
        stage_start = time.time()

        if repository is None:
            repository = create_repository(config)
        collections, fetch_errors = fetch_collections(repository, timeout=config.get_fetch_timeout())

        statistics['stages']['ingestion'] = {
            'duration': time.time() - stage_start,
            'rows_fetched': {name: len(df) for name, df in collections.items()},
            'errors': fetch_errors,
        }

        # ---- Data quality
        if run_quality_check:
            stage_start = time.time()
            quality_results = run_data_quality_checks(collections)
            statistics['stages']['quality_check'] = {
                'duration': time.time() - stage_start,
                'issues_found': quality_results.get('total_issues', 0),
            }

        # ---- Reports
        stage_start = time.time()

        report = build_analytics_report(
            collections['orders'],
            collections['order_items'],
            collections['foods'],
            collections['categories'],
            now=now,
            days=config.get_days(),
            top_limit=config.get_top_foods_limit(),
            tz=timezone,
            verify=run_quality_check,
        )

        statistics['stages']['reports'] = {
            'duration': time.time() - stage_start,
            'source': report.source,
        }
        if report.total_discrepancies is not None:
            statistics['stages']['reports']['total_amount_discrepancies'] = len(report.total_discrepancies)

        statistics['report'] = report
        statistics['status'] = 'success'
        logger.info("Analytics report completed successfully")

    except Exception as e:
        logger.error(f"Analytics report failed: {str(e)}")
        logger.error(traceback.format_exc())
        statistics['status'] = 'failed'
        statistics['error'] = str(e)

    # Calculate total duration
    statistics['duration'] = time.time() - start_time

    return statistics


def print_report(report):
    """Print the reports in a readable form."""
    revenue = report.revenue_by_time_range
    counts = report.order_counts_by_time_range

    print(f"\nReports computed from {report.source} at {report.generated_at:%Y-%m-%d %H:%M}")

    print("\nRevenue & orders by time period:")
    for period, amount in revenue.to_dict().items():
        print(f"  {period:<11} {amount:>12.2f}  ({getattr(counts, period)} orders)")

    print(f"\nAverage order value: {report.average_order_value:.2f}")

    status = report.order_status_distribution
    print(f"Order status: {status.completed} completed, {status.in_progress} in progress, "
          f"{status.canceled} canceled, {status.total} total")

    print("\nDaily revenue:")
    for row in report.daily_revenue.itertuples(index=False):
        print(f"  {row.date:>5} {row.revenue:>12.2f}")

    peak = report.hourly_revenue['revenue'].idxmax()
    print(f"\nPeak hour: {peak}:00 ({report.hourly_revenue.loc[peak, 'revenue']:.2f})")

    print("\nTop selling foods:")
    for row in report.top_performing_foods.itertuples(index=False):
        print(f"  {row.food_name:<30} {row.revenue:>12.2f}  qty {row.quantity_sold}")

    print("\nCategory performance:")
    for row in report.category_performance.itertuples(index=False):
        print(f"  {row.category_name!s:<30} {row.revenue:>12.2f}  qty {row.quantity_sold}")


def main():
    """Command line entry point."""
    parser = argparse.ArgumentParser(description='Restaurant Analytics Reports')
    parser.add_argument('--config', default='config.ini', help='Path to configuration file')
    parser.add_argument('--source', choices=['database', 'csv'], help='Where to read orders from')
    parser.add_argument('--days', type=int, help='Number of days in the daily revenue series')
    parser.add_argument('--top', type=int, help='Number of top foods to list')
    parser.add_argument('--quality-check', action='store_true', help='Run data quality checks')
    parser.add_argument('--no-quality-check', action='store_true', help='Skip data quality checks')
    parser.add_argument('--json', action='store_true', help='Print the reports as JSON')

    args = parser.parse_args()

    # Determine quality check mode
    quality_check = None
    if args.quality_check:
        quality_check = True
    elif args.no_quality_check:
        quality_check = False

    results = run_report(
        config_file=args.config,
        source=args.source,
        days=args.days,
        top=args.top,
        quality_check=quality_check,
    )

    if args.json and results['status'] == 'success':
        print(json.dumps(results['report'].to_dict(), indent=2))
        return

    # Print summary
    print("\nAnalytics Report Summary:")
    print(f"Status: {results['status']}")
    print(f"Duration: {results['duration']:.2f} seconds")

    if results['status'] == 'failed' and 'error' in results:
        print(f"Error: {results['error']}")

    for stage, stats in results.get('stages', {}).items():
        print(f"\n{stage.capitalize()} stage:")
        for key, value in stats.items():
            if key != 'rows_fetched':
                print(f"  {key}: {value}")

    if results['status'] == 'success':
        print_report(results['report'])


if __name__ == "__main__":
    main()
