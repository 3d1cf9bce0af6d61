from datetime import datetime, timezone
from typing import Dict, List

from parkpass.application.services.ledger_service import LedgerStore
from parkpass.domain.common import BookingStatus


class AnalyticsService:
    """Read-only figures for an owner's dashboard."""

    def __init__(self, store: LedgerStore):
        self.store = store

    async def get_booking_stats(self, owner_id: str) -> Dict:
        bookings = await self.store.list_bookings_by_owner(owner_id)
        today = datetime.now(timezone.utc).date()

        by_status = {status.value: 0 for status in BookingStatus}
        for booking in bookings:
            by_status[booking.status.value] += 1

        todays_revenue = sum(
            b.total_cost for b in bookings if b.start_time.astimezone(timezone.utc).date() == today
        )

        return {
            "total": len(bookings),
            "by_status": by_status,
            "todays_revenue": round(todays_revenue, 2),
        }

    async def get_review_summary(self, owner_id: str) -> Dict:
        reviews = []
        for spot in await self.store.list_spots_by_owner(owner_id):
            reviews.extend(await self.store.list_reviews_by_spot(spot.id))

        total = len(reviews)
        average = sum(r.rating for r in reviews) / total if total else 0.0
        positive = len([r for r in reviews if r.rating >= 4])

        distribution: List[Dict] = []
        for rating in range(5, 0, -1):
            count = len([r for r in reviews if r.rating == rating])
            distribution.append({
                "rating": rating,
                "count": count,
                "percentage": round(count / total * 100, 2) if total else 0.0,
            })

        return {
            "total_reviews": total,
            "average_rating": round(average, 2),
            "positive_reviews": positive,
            "positive_percentage": round(positive / total * 100) if total else 0,
            "distribution": distribution,
        }

    async def get_occupancy(self, owner_id: str) -> Dict:
        spots = await self.store.list_spots_by_owner(owner_id)

        per_spot = []
        for spot in spots:
            per_spot.append({
                "spot_id": spot.id,
                "name": spot.name,
                "total": spot.total_slots,
                "available": spot.available_slots,
                "occupied": spot.total_slots - spot.available_slots,
                "is_active": spot.is_active,
            })

        total_slots = sum(s["total"] for s in per_spot)
        occupied = sum(s["occupied"] for s in per_spot)
        occupancy_rate = (occupied / total_slots * 100) if total_slots > 0 else 0

        return {
            "total_slots": total_slots,
            "occupied_slots": occupied,
            "available_slots": total_slots - occupied,
            "occupancy_rate": round(occupancy_rate, 2),
            "spots": per_spot,
        }
