"""
Data quality checks on the collections fetched for the analytics reports.

The reports tolerate missing and dangling values, so these checks only
describe the issues; nothing is fixed or dropped here.
"""
import logging
import traceback

import pandas as pd

from restaurant_analytics.analytics.models import OrderStatus

logger = logging.getLogger(__name__)

PRIMARY_KEYS = {
    'orders': ['order_id'],
    'order_items': ['item_id'],
    'foods': ['food_id'],
    'categories': ['id'],
}

KNOWN_STATUS_CODES = {status.code for status in OrderStatus}


def run_data_quality_checks(data_frames):
    """
    Run a series of data quality checks on the input data.

    """
    try:
        logger.info("Running data quality checks")

        quality_results = {}

        # Run individual checks
        quality_results['missing_values'] = check_missing_values(data_frames)
        quality_results['duplicate_keys'] = check_duplicate_keys(data_frames)
        quality_results['value_ranges'] = check_value_ranges(data_frames)
        quality_results['referential_integrity'] = check_referential_integrity(data_frames)

        total_issues = count_issues(quality_results)
        if total_issues > 0:
            logger.warning(f"Found a total of {total_issues} data quality issues")
        else:
            logger.info("All data quality checks passed")

        quality_results['total_issues'] = total_issues
        return quality_results
    except Exception as e:
        logger.error(f"Error running data quality checks: {str(e)}")
        logger.error(traceback.format_exc())
        return {'error': str(e), 'total_issues': 0}


def count_issues(quality_results):
    """
    Total of the issue counters found in the check results.
    """
    total = 0
    for result in quality_results.get('duplicate_keys', {}).values():
        total += int(result.get('duplicate_count', 0))
    for table_results in quality_results.get('value_ranges', {}).values():
        for result in table_results.values():
            total += int(result.get('invalid_count', 0))
    for result in quality_results.get('referential_integrity', {}).values():
        total += int(result.get('orphaned_count', 0))
    return total


def check_missing_values(data_frames):
    """
    Check for missing values in each DataFrame.

    Missing values are legitimate in most columns (an item not yet attached to
    an order, an order without timestamp), so they are reported, not counted
    as issues.
    """
    results = {}

    for table_name, df in data_frames.items():
        # Get count of missing values by column
        missing_by_column = df.isnull().sum()
        total_missing = int(missing_by_column.sum())

        # Only include columns with missing values
        missing_columns = {col: int(count) for col, count in missing_by_column[missing_by_column > 0].items()}

        results[table_name] = {
            'total_missing': total_missing,
            'missing_columns': missing_columns
        }

        if total_missing > 0:
            logger.info(f"Table '{table_name}' has {total_missing} missing values")
            for col, count in missing_columns.items():
                logger.info(f"  - Column '{col}': {count} missing values")

    return results


def check_duplicate_keys(data_frames):
    """
    Check for duplicate primary keys in each DataFrame.
    """
    results = {}

    for table_name, df in data_frames.items():
        if table_name not in PRIMARY_KEYS:
            continue

        pk_columns = PRIMARY_KEYS[table_name]

        # Skip if not all primary key columns exist
        if not all(col in df.columns for col in pk_columns):
            results[table_name] = {
                'duplicate_count': 0,
                'error': f"Not all primary key columns {pk_columns} exist in table"
            }
            continue

        keyed = df.dropna(subset=pk_columns)
        duplicates = keyed[keyed.duplicated(subset=pk_columns, keep=False)]
        duplicate_count = len(duplicates)

        results[table_name] = {
            'duplicate_count': duplicate_count,
            'duplicate_keys': duplicates[pk_columns].head(10).values.tolist() if duplicate_count > 0 else []
        }

        if duplicate_count > 0:
            logger.warning(f"Table '{table_name}' has {duplicate_count} duplicate primary keys")

    return results


def check_value_ranges(data_frames):
    """
    Check for values outside of expected ranges. Missing values are skipped.
    """
    results = {}

    # Define expected value ranges and conditions
    range_checks = {
        'orders': {
            'total_price': lambda x: x >= 0,
            'status_code': lambda x: x in KNOWN_STATUS_CODES,
        },
        'order_items': {
            'quantity': lambda x: x > 0,
            'unit_price': lambda x: x >= 0,
        },
        'foods': {
            'price': lambda x: x >= 0,
        }
    }

    for table_name, df in data_frames.items():
        if table_name not in range_checks:
            continue

        table_results = {}
        for column, condition in range_checks[table_name].items():
            if column not in df.columns:
                table_results[column] = {'invalid_count': 0, 'error': f"Column '{column}' not found in table"}
                continue

            values = pd.to_numeric(df[column], errors='coerce').dropna()
            invalid = values[~values.apply(condition).astype(bool)]
            invalid_count = len(invalid)

            table_results[column] = {
                'invalid_count': invalid_count,
                'invalid_examples': invalid.head(5).tolist() if invalid_count > 0 else []
            }

            if invalid_count > 0:
                logger.warning(f"Table '{table_name}' has {invalid_count} invalid values in column '{column}'")

        results[table_name] = table_results

    return results


def _category_memberships(categories):
    if 'food_ids' not in categories.columns:
        return pd.DataFrame(columns=['food_id'])
    memberships = categories[['food_ids']].explode('food_ids').dropna()
    return memberships.rename(columns={'food_ids': 'food_id'})


def check_referential_integrity(data_frames):
    """
    Check referential integrity between tables.

    Items whose food no longer exists are expected (foods can be deleted
    after being sold) and are reported like any other dangling reference.
    """
    results = {}

    tables = dict(data_frames)
    if 'categories' in tables:
        tables['category_foods'] = _category_memberships(tables['categories'])

    # Define foreign key relationships
    foreign_keys = [
        {'table': 'order_items', 'key': 'order_id', 'ref_table': 'orders', 'ref_key': 'order_id'},
        {'table': 'order_items', 'key': 'food_id', 'ref_table': 'foods', 'ref_key': 'food_id'},
        {'table': 'category_foods', 'key': 'food_id', 'ref_table': 'foods', 'ref_key': 'food_id'},
    ]

    for fk in foreign_keys:
        relationship = f"{fk['table']}.{fk['key']} -> {fk['ref_table']}.{fk['ref_key']}"

        # Check if all required tables and columns exist
        if (fk['table'] in tables and fk['ref_table'] in tables and
                fk['key'] in tables[fk['table']].columns and
                fk['ref_key'] in tables[fk['ref_table']].columns):

            fk_values = set(tables[fk['table']][fk['key']].dropna().unique())
            ref_values = set(tables[fk['ref_table']][fk['ref_key']].dropna().unique())

            # Without any reference rows there is nothing to check against
            if not ref_values:
                results[relationship] = {'orphaned_count': 0, 'skipped': f"{fk['ref_table']} is empty"}
                continue

            orphaned = fk_values - ref_values
            orphaned_count = len(orphaned)

            results[relationship] = {
                'orphaned_count': orphaned_count,
                'orphaned_examples': sorted(orphaned, key=str)[:10] if orphaned_count > 0 else []
            }

            if orphaned_count > 0:
                logger.warning(
                    f"Referential integrity issue: {orphaned_count} values in "
                    f"{fk['table']}.{fk['key']} have no matching {fk['ref_table']}.{fk['ref_key']}"
                )
        else:
            results[relationship] = {'orphaned_count': 0, 'error': 'Missing table or column'}

    return results
