"""Pure functions deriving view numbers from loaded rows.

They are recomputed on every load; nothing here is cached or incremental.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from iwems.models import ApprovalStatus, EventStatus

CAPACITY_BUCKETS = {
    "all": "All Sizes",
    "0-50": "Intimate (0-50 guests)",
    "51-100": "Small (51-100 guests)",
    "101-200": "Medium (101-200 guests)",
    "201-500": "Large (201-500 guests)",
    "501": "Grand (500+ guests)",
}

ACTIVE_EVENT_STATUSES = {EventStatus.PLANNING.value, EventStatus.CONFIRMED.value}


def parse_capacity_range(capacity_filter: Optional[str]) -> Optional[Tuple[int, Optional[int]]]:
    """``"101-200"`` -> (101, 200); ``"501"`` -> (501, None); ``"all"``/empty -> None."""
    if not capacity_filter or capacity_filter == "all":
        return None
    low, _, high = capacity_filter.partition("-")
    return int(low), (int(high) if high else None)


def _matches_search(venue: Dict[str, Any], term: str) -> bool:
    for field in ("name", "description", "location"):
        value = venue.get(field)
        if value and term in value.lower():
            return True
    return False


def filter_venues(venues: List[Dict[str, Any]], search: str = "", capacity_filter: Optional[str] = "all") -> List[Dict[str, Any]]:
    filtered = venues
    term = (search or "").strip().lower()
    if term:
        filtered = [v for v in filtered if _matches_search(v, term)]

    bounds = parse_capacity_range(capacity_filter)
    if bounds is not None:
        low, high = bounds
        # Venues without a capacity never match a size bucket.
        filtered = [
            v for v in filtered
            if v.get("capacity") and v["capacity"] >= low and (high is None or v["capacity"] <= high)
        ]
    return filtered


def filter_vendors(vendors: List[Dict[str, Any]], search: str = "", category: Optional[str] = None) -> List[Dict[str, Any]]:
    filtered = vendors
    if category and category != "all":
        filtered = [v for v in filtered if v.get("category") == category]
    term = (search or "").strip().lower()
    if term:
        filtered = [
            v for v in filtered
            if any(term in (v.get(f) or "").lower() for f in ("business_name", "description", "location"))
        ]
    return filtered


def unavailable_dates(entries: Iterable[Dict[str, Any]]) -> List[str]:
    return sorted({e["date"] for e in entries if not e.get("is_available", False)})


def is_date_available(entries: Iterable[Dict[str, Any]], day: date) -> bool:
    """Absence of an entry means the venue is available that day."""
    return day.isoformat() not in unavailable_dates(entries)


def event_stats(events: List[Dict[str, Any]], today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    upcoming = [
        e for e in events
        if e.get("event_date") and date.fromisoformat(str(e["event_date"])[:10]) >= today
        and e.get("status") != EventStatus.CANCELLED.value
    ]
    return {
        "totalEvents": len(events),
        "upcomingEvents": len(upcoming),
        "totalBudget": sum(e.get("budget") or 0 for e in events),
        "totalGuests": sum(e.get("guest_count") or 0 for e in events),
    }


def planner_stats(events: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "totalEvents": len(events),
        "activeEvents": sum(1 for e in events if e.get("status") in ACTIVE_EVENT_STATUSES),
        "totalClients": len({e.get("couple_id") for e in events}),
        "totalBudget": sum(e.get("budget") or 0 for e in events),
    }


def pending_count(rows: Iterable[Dict[str, Any]]) -> int:
    return sum(1 for r in rows if r.get("approval_status") == ApprovalStatus.PENDING.value)


def admin_analytics(counts: Dict[str, int], vendors: List[Dict[str, Any]], venues: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "totalUsers": counts.get("profiles", 0),
        "totalEvents": counts.get("events", 0),
        "totalVendors": counts.get("vendors", 0),
        "totalVenues": counts.get("venues", 0),
        "pendingVendors": pending_count(vendors),
        "pendingVenues": pending_count(venues),
        "activeBookings": counts.get("pending_bookings", 0),
    }


def users_with_roles(profiles: List[Dict[str, Any]], role_rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    by_user: Dict[str, List[str]] = {}
    for row in role_rows:
        by_user.setdefault(row.get("user_id"), []).append(row.get("role"))
    return [{**profile, "roles": by_user.get(profile.get("id"), [])} for profile in profiles]
