"""
Static featured-events dataset.

Read-only seed data for presentation layers that need event cards before
any event is stored. Nothing here is written to the database, and the
records only carry card fields, not the full event schema.
"""

from typing import List, Optional
from pydantic import BaseModel

class FeaturedEvent(BaseModel):
    """Card data for a featured event"""
    title: str
    image: str  # path under /images
    slug: str
    location: str
    date: str  # YYYY-MM-DD
    time: str  # start time only

FEATURED_EVENTS: List[FeaturedEvent] = [
    FeaturedEvent(
        title="Next.js Conf 2025",
        image="/images/event1.png",
        slug="nextjs-conf-2025",
        location="San Francisco, CA",
        date="2025-10-21",
        time="9:00 AM PDT",
    ),
    FeaturedEvent(
        title="React Summit US 2025",
        image="/images/event2.png",
        slug="react-summit-us-2025",
        location="New York, NY",
        date="2025-09-12",
        time="9:30 AM EDT",
    ),
    FeaturedEvent(
        title="JSConf EU 2026",
        image="/images/event3.png",
        slug="jsconf-eu-2026",
        location="Berlin, Germany",
        date="2026-05-18",
        time="9:00 AM CET",
    ),
    FeaturedEvent(
        title="KubeCon + CloudNativeCon NA 2025",
        image="/images/event4.png",
        slug="kubecon-na-2025",
        location="Austin, TX",
        date="2025-11-17",
        time="9:00 AM CST",
    ),
    FeaturedEvent(
        title="Google I/O 2026",
        image="/images/event5.png",
        slug="google-io-2026",
        location="Mountain View, CA",
        date="2026-05-14",
        time="10:00 AM PDT",
    ),
    FeaturedEvent(
        title="ETHGlobal San Francisco 2025",
        image="/images/event6.png",
        slug="ethglobal-san-francisco-2025",
        location="San Francisco, CA",
        date="2025-08-08",
        time="6:00 PM PDT",
    ),
    FeaturedEvent(
        title="AWS re:Invent 2025",
        image="/images/event-full.png",
        slug="aws-reinvent-2025",
        location="Las Vegas, NV",
        date="2025-12-01",
        time="9:00 AM PST",
    ),
]

def get_featured_event(slug: str) -> Optional[FeaturedEvent]:
    for event in FEATURED_EVENTS:
        if event.slug == slug:
            return event
    return None
