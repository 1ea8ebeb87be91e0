"""
Time bucket classification of timestamps relative to a reference "now".

Each bucket answers an independent question ("is this within period X"), so a
timestamp can belong to several buckets at once. Membership is the equality of
the (calendar year, ordinal) pair of the timestamp and of a reference instant
derived from ``now``.
"""
from enum import Enum

import pandas as pd

from restaurant_analytics.analytics.schema import to_local_time, resolve_now


class TimeBucket(str, Enum):
    TODAY = 'today'
    YESTERDAY = 'yesterday'
    THIS_WEEK = 'this_week'
    LAST_WEEK = 'last_week'
    THIS_MONTH = 'this_month'
    LAST_MONTH = 'last_month'
    THIS_YEAR = 'this_year'


# bucket -> (shift applied to now, ordinal compared alongside the year)
_BUCKET_RULES = {
    TimeBucket.TODAY: (None, 'day'),
    TimeBucket.YESTERDAY: (pd.Timedelta(days=1), 'day'),
    TimeBucket.THIS_WEEK: (None, 'week'),
    TimeBucket.LAST_WEEK: (pd.Timedelta(days=7), 'week'),
    TimeBucket.THIS_MONTH: (None, 'month'),
    TimeBucket.LAST_MONTH: (pd.DateOffset(months=1), 'month'),
    TimeBucket.THIS_YEAR: (None, None),
}


def reference_instant(bucket, now):
    """
    The instant whose period defines the bucket: now, or now moved back.
    """
    shift, _ = _BUCKET_RULES[TimeBucket(bucket)]
    if shift is None:
        return now
    return now - shift


def week_of_year(stamps):
    """
    Week number of each timestamp, with weeks starting on Sunday.

    Week 1 is the week holding January 1st, so the last days of December that
    share a week with the next January 1st are numbered 1 while keeping their
    own calendar year.
    """
    day_of_year = stamps.dt.dayofyear
    weekday = (stamps.dt.dayofweek + 1) % 7  # Sunday = 0
    jan1_weekday = (weekday - (day_of_year - 1)) % 7

    week = (day_of_year - 1 + jan1_weekday) // 7 + 1
    week_end = stamps + pd.to_timedelta(6 - weekday, unit='D')
    return week.where(week_end.dt.year.eq(stamps.dt.year) | stamps.isna(), 1)


def _ordinal_of_series(stamps, ordinal):
    if ordinal == 'day':
        return stamps.dt.dayofyear
    if ordinal == 'week':
        # Compared with the calendar year, not with the year the week belongs to
        return week_of_year(stamps)
    return stamps.dt.month


def _ordinal_of_instant(instant, ordinal):
    return _ordinal_of_series(pd.Series([instant]), ordinal).iloc[0]


def bucket_mask(timestamps, bucket, now):
    """
    Boolean Series telling which timestamps fall into the bucket.

    Missing timestamps never belong to a bucket.
    """
    stamps = timestamps
    if not pd.api.types.is_datetime64_any_dtype(stamps) or stamps.dt.tz is not None:
        stamps = to_local_time(stamps)

    bucket = TimeBucket(bucket)
    _, ordinal = _BUCKET_RULES[bucket]
    reference = reference_instant(bucket, resolve_now(now))

    mask = stamps.dt.year.eq(reference.year)
    if ordinal is not None:
        mask = mask & _ordinal_of_series(stamps, ordinal).eq(_ordinal_of_instant(reference, ordinal))

    return mask.fillna(False).astype(bool)


def classify(timestamp, now=None):
    """
    Membership of a single timestamp in every bucket.

    Returns a dict of bucket name -> bool; a missing timestamp is in no bucket.
    """
    now = resolve_now(now)
    stamps = to_local_time(pd.Series([timestamp]))
    return {
        bucket.value: bool(bucket_mask(stamps, bucket, now).iloc[0])
        for bucket in TimeBucket
    }
