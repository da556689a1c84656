import datetime

from pydantic import BaseModel

from app.schemas.forms import FieldDefinition


class SummaryStats(BaseModel):
    """Headline counters for a form's responses"""
    total: int = 0
    today: int = 0
    this_week: int = 0  # created within the last 7 days
    average_per_day: float = 0.0  # per distinct day with responses, 1 decimal


class TimeSeriesPoint(BaseModel):
    date: datetime.date
    count: int


class OptionBucket(BaseModel):
    option: str
    count: int = 0
    percentage: int = 0  # of all submissions, rounded


class FieldDistribution(BaseModel):
    field: FieldDefinition
    buckets: list[OptionBucket]
    total_responses: int


class FormAnalyticsOut(BaseModel):
    form_id: str
    summary: SummaryStats
    time_series: list[TimeSeriesPoint]
    distributions: list[FieldDistribution]


class TopFormOut(BaseModel):
    id: str
    title: str
    description: str | None
    submission_count: int


class AnalyticsOverviewOut(BaseModel):
    """Account-wide numbers across all of the user's forms"""
    total_forms: int
    summary: SummaryStats
    time_series: list[TimeSeriesPoint]
    top_forms: list[TopFormOut]  # most responses first, at most 10
