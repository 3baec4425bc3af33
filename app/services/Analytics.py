import logging

from sqlalchemy.orm import Session

from app.db import repository
from app.schemas.AnalyticsSummary import AnalyticsSummary, DailyClicks, RecentClick, TopLink

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Link"


def _iso(value) -> str:
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


class Analytics:

    @staticmethod
    def summary(db: Session, days: int = 30) -> AnalyticsSummary:
        total_links, total_clicks = repository.get_total_stats(db)
        top_links = [
            TopLink(
                id=link.id,
                title=link.title or UNTITLED,
                short_code=link.short_code,
                click_count=link.click_count or 0,
                original_url=link.original_url,
            ) for link in repository.get_top_links(db)
        ]
        clicks_over_time = [
            DailyClicks(date=str(row.date), clicks=row.clicks)
            for row in repository.get_clicks_over_time(db, days)
        ]
        recent_clicks = [
            RecentClick(
                id=click.id,
                link_title=link.title or UNTITLED,
                short_code=link.short_code,
                clicked_at=_iso(click.clicked_at),
                user_agent=click.user_agent or "Unknown",
                referrer=click.referrer or "Direct",
            ) for click, link in repository.get_recent_clicks(db)
        ]
        return AnalyticsSummary(
            total_links=total_links,
            total_clicks=total_clicks,
            top_links=top_links,
            clicks_over_time=clicks_over_time,
            recent_clicks=recent_clicks,
        )
