"""
License Service
Presentation service for license lists and counts.
"""

from typing import Dict, Optional
from sqlalchemy import func
from asset_tracker import db
from asset_tracker.data.core.license_info.license import License, LicenseStatus


class LicenseService:

    @staticmethod
    def build_filtered_query(status: Optional[str] = None, name: Optional[str] = None):
        query = License.query

        if status:
            query = query.filter(License.status == status)

        if name:
            query = query.filter(License.name.ilike(f'%{name}%'))

        return query.order_by(License.id)

    @staticmethod
    def get_list_query(request):
        return LicenseService.build_filtered_query(
            status=request.args.get('status'),
            name=request.args.get('name')
        )

    @staticmethod
    def get_status_counts() -> Dict[str, int]:
        rows = db.session.query(License.status, func.count(License.id)).group_by(License.status).all()
        counts = {status: 0 for status in LicenseStatus.ALL}
        counts.update({status: count for status, count in rows})
        return {
            'total': sum(counts.values()),
            'active': counts[LicenseStatus.ACTIVE],
            'unused': counts[LicenseStatus.UNUSED],
            'expired': counts[LicenseStatus.EXPIRED],
        }
