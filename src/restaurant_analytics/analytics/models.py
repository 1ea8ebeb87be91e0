"""
Report value types returned by the analytics functions.
"""
import json
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional

import pandas as pd


def _records(df):
    # Through JSON so numpy scalars come back as plain Python values
    return json.loads(df.to_json(orient='records'))


class OrderStatus(Enum):
    PENDING = (0, 'Pending')
    ACCEPTED = (1, 'Accepted')
    PREPARING = (2, 'Preparing')
    IN_PROGRESS = (3, 'In Progress')
    COMPLETED = (4, 'Completed')
    CANCELLED = (5, 'Cancelled')

    def __init__(self, code, display_name):
        self.code = code
        self.display_name = display_name

    @classmethod
    def from_code(cls, code):
        """Status for a code; unknown codes read as PENDING."""
        for status in cls:
            if status.code == code:
                return status
        return cls.PENDING


@dataclass(frozen=True)
class RevenueByTimeRange:
    """Revenue per time bucket. Buckets overlap, so they do not add up to total."""

    today: float = 0.0
    yesterday: float = 0.0
    this_week: float = 0.0
    last_week: float = 0.0
    this_month: float = 0.0
    last_month: float = 0.0
    this_year: float = 0.0
    total: float = 0.0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class OrderCountsByTimeRange:
    """Number of orders per time bucket."""

    today: int = 0
    yesterday: int = 0
    this_week: int = 0
    last_week: int = 0
    this_month: int = 0
    last_month: int = 0
    this_year: int = 0
    total: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class OrderStatusDistribution:
    completed: int = 0
    in_progress: int = 0
    canceled: int = 0
    total: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True, eq=False)
class AnalyticsReport:
    """Every dashboard report computed from one snapshot of the collections."""

    source: str
    generated_at: pd.Timestamp
    revenue_by_time_range: RevenueByTimeRange
    order_counts_by_time_range: OrderCountsByTimeRange
    top_performing_foods: pd.DataFrame
    category_performance: pd.DataFrame
    daily_revenue: pd.DataFrame
    hourly_revenue: pd.DataFrame
    average_order_value: float
    order_status_distribution: OrderStatusDistribution
    total_discrepancies: Optional[pd.DataFrame] = None

    def top_foods_by_revenue(self, count=5):
        return self.top_performing_foods.head(count).reset_index(drop=True)

    def top_categories_by_revenue(self, count=5):
        return self.category_performance.head(count).reset_index(drop=True)

    def to_dict(self):
        return {
            'source': self.source,
            'generated_at': self.generated_at.isoformat(),
            'revenue_by_time_range': self.revenue_by_time_range.to_dict(),
            'order_counts_by_time_range': self.order_counts_by_time_range.to_dict(),
            'top_performing_foods': _records(self.top_performing_foods),
            'category_performance': _records(self.category_performance),
            'daily_revenue': _records(self.daily_revenue[['date', 'revenue']]),
            'hourly_revenue': _records(self.hourly_revenue[['hour', 'revenue']]),
            'average_order_value': self.average_order_value,
            'order_status_distribution': self.order_status_distribution.to_dict(),
        }
