from pydantic import BaseModel
from typing import List

class TopLink(BaseModel):
    id: int
    title: str
    short_code: str
    click_count: int
    original_url: str

class DailyClicks(BaseModel):
    date: str
    clicks: int

class RecentClick(BaseModel):
    id: int
    link_title: str
    short_code: str
    clicked_at: str
    user_agent: str
    referrer: str

class AnalyticsSummary(BaseModel):
    total_links: int
    total_clicks: int
    top_links: List[TopLink]
    clicks_over_time: List[DailyClicks]
    recent_clicks: List[RecentClick]
