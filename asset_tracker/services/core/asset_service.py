"""
Asset Service
Presentation service for asset-related data retrieval.

Handles:
- Query building and filtering for asset list views
- Status counts for the stats endpoint
"""

from typing import Dict, Optional
from flask import Request
from sqlalchemy import func, or_
from asset_tracker import db
from asset_tracker.data.core.asset_info.asset import Asset, AssetStatus


class AssetService:
    """
    Service for asset presentation data.

    Provides methods for:
    - Building filtered asset queries
    - Counting assets per status
    """

    @staticmethod
    def build_filtered_query(
        status: Optional[str] = None,
        category: Optional[str] = None,
        knox_id: Optional[str] = None,
        assigned_to: Optional[int] = None,
        search: Optional[str] = None
    ):
        """
        Build a filtered asset query.

        Args:
            status: Filter by status
            category: Filter by category
            knox_id: Filter by exact Knox ID
            assigned_to: Filter by holder
            search: Partial match on tag, name or serial number

        Returns:
            SQLAlchemy query object
        """
        query = Asset.query

        if status:
            query = query.filter(Asset.status == status)

        if category:
            query = query.filter(Asset.category == category)

        if knox_id:
            query = query.filter(Asset.knox_id == knox_id)

        if assigned_to:
            query = query.filter(Asset.assigned_to == assigned_to)

        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                Asset.asset_tag.ilike(pattern),
                Asset.name.ilike(pattern),
                Asset.serial_number.ilike(pattern)
            ))

        return query.order_by(Asset.id)

    @staticmethod
    def get_list_query(request: Request):
        """Asset query with filters taken from the query string"""
        return AssetService.build_filtered_query(
            status=request.args.get('status'),
            category=request.args.get('category'),
            knox_id=request.args.get('knoxId'),
            assigned_to=request.args.get('assignedTo', type=int),
            search=request.args.get('search')
        )

    @staticmethod
    def get_status_counts() -> Dict[str, int]:
        """Asset totals per status, matching the dashboard cards"""
        rows = db.session.query(Asset.status, func.count(Asset.id)).group_by(Asset.status).all()
        counts = {status: 0 for status in AssetStatus.ALL}
        counts.update({status: count for status, count in rows})
        return {
            'total': sum(counts.values()),
            'checkedOut': counts[AssetStatus.DEPLOYED],
            'available': counts[AssetStatus.AVAILABLE],
            'pending': counts[AssetStatus.PENDING],
            'overdue': counts[AssetStatus.OVERDUE],
            'archived': counts[AssetStatus.ARCHIVED],
        }
