"""
LicenseSeatManager - owns license seats and license status

Responsibilities:
- Seat assignment with capacity enforcement
- Status derivation through recompute_status on every seat/expiration change
- License create / edit / delete (assignments are removed before the license)

Seat counter writes are conditional on the counter value that was read
(UPDATE ... WHERE id = :id AND assigned_seats = :read), so concurrent
assignments cannot overcommit a license.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from asset_tracker import db
from asset_tracker.buisness.core.activity_recorder import ActivityRecorder, ItemType
from asset_tracker.buisness.core.exceptions import CapacityExceeded, Conflict, NotFound
from asset_tracker.buisness.core.unit_of_work import unit_of_work
from asset_tracker.buisness.core.validation import (
    LICENSE_FIELD_PARSERS,
    parse_id,
    parse_required_string,
    parse_string,
    validate_fields,
)
from asset_tracker.buisness.licenses.license_status import recompute_status
from asset_tracker.data.core.license_info.license import License, LicenseStatus, UNLIMITED_SEATS
from asset_tracker.data.core.license_info.license_assignment import LicenseAssignment
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.buisness.licenses.seats")


def _seat_limit(seats: str) -> Optional[int]:
    return None if seats == UNLIMITED_SEATS else int(seats)


class LicenseSeatManager:
    """Business logic for license seats and status"""

    @staticmethod
    def get_license(license_id) -> License:
        license = db.session.get(License, parse_id(license_id, 'license_id'))
        if license is None:
            raise NotFound(f"License {license_id} not found")
        return license

    @staticmethod
    def _check_capacity(seats: str, assigned_seats: int) -> None:
        limit = _seat_limit(seats)
        if limit is not None and assigned_seats > limit:
            raise CapacityExceeded(f"Assigned seats ({assigned_seats}) exceed available seats ({limit})")

    @staticmethod
    def _conditional_update(license: License, read_assigned: int, values: Dict[str, Any]) -> bool:
        count = License.query.filter(
            License.id == license.id,
            License.assigned_seats == read_assigned
        ).update(values, synchronize_session=False)
        db.session.expire(license)
        return count == 1

    @classmethod
    def create_license(cls, data: Dict[str, Any], acting_user_id=None, commit: bool = True) -> License:
        """
        Create a license. Its status is derived from the initial seats and
        expiration date, never taken from the caller.
        """
        fields = validate_fields(data, LICENSE_FIELD_PARSERS, required=('name',), rejected=('status',))
        fields.setdefault('seats', '1')
        fields.setdefault('assigned_seats', 0)
        cls._check_capacity(fields['seats'], fields['assigned_seats'])

        with unit_of_work(commit):
            fields['status'] = recompute_status(fields.get('expiration_date'), fields['assigned_seats'])
            license = License.from_dict(fields, acting_user_id)
            db.session.add(license)
            db.session.flush()

            ActivityRecorder.record(
                'create', ItemType.LICENSE, license.id, acting_user_id,
                f'License "{license.name}" created'
            )
            logger.info(f"License created: {license.name} (ID: {license.id}, status {license.status})")
            return license

    @classmethod
    def assign_seat(
        cls,
        license_id,
        assigned_to: str,
        notes: Optional[str] = None,
        acting_user_id=None,
        commit: bool = True
    ) -> Tuple[LicenseAssignment, License]:
        """
        Grant one seat of a license.

        Raises:
            NotFound: license missing
            ValidationError: assigned_to missing
            CapacityExceeded: every numeric seat is taken (never for Unlimited)
            Conflict: the seat counter changed under us
        """
        assigned_to = parse_required_string(assigned_to, 'assigned_to', 200)
        notes = parse_string(notes, 'notes')

        with unit_of_work(commit):
            license = cls.get_license(license_id)
            read_assigned = license.assigned_seats or 0

            limit = license.seat_limit
            if limit is not None and read_assigned >= limit:
                raise CapacityExceeded("No available seats for this license")

            assignment = LicenseAssignment(
                license_id=license.id,
                assigned_to=assigned_to,
                assigned_date=datetime.utcnow(),
                notes=notes
            )
            db.session.add(assignment)

            new_assigned = read_assigned + 1
            values = {
                'assigned_seats': new_assigned,
                'status': recompute_status(license.expiration_date, new_assigned),
            }
            if acting_user_id is not None:
                values['updated_by_id'] = acting_user_id
            if not cls._conditional_update(license, read_assigned, values):
                raise Conflict(f"License {license.id} seats changed by another request; retry")

            ActivityRecorder.record(
                'assign-seat', ItemType.LICENSE, license.id, acting_user_id,
                f"License seat assigned to: {assigned_to}"
            )
            logger.info(f"License {license.id} seat assigned to {assigned_to} ({new_assigned}/{license.seats})")
            return assignment, license

    @classmethod
    def update_license(cls, license_id, data: Dict[str, Any], acting_user_id=None, commit: bool = True) -> License:
        """
        Merge ``data`` into a license.

        When assigned_seats or expiration_date is supplied the status is
        recomputed from the merged values. Status itself cannot be written.
        """
        fields = validate_fields(data, LICENSE_FIELD_PARSERS, rejected=('status',))

        with unit_of_work(commit):
            license = cls.get_license(license_id)
            read_assigned = license.assigned_seats or 0

            merged_seats = fields.get('seats', license.seats)
            merged_assigned = fields.get('assigned_seats', read_assigned)
            merged_expiration = fields.get('expiration_date', license.expiration_date)
            cls._check_capacity(merged_seats, merged_assigned)

            values = dict(fields)
            if 'assigned_seats' in fields or 'expiration_date' in fields:
                values['status'] = recompute_status(merged_expiration, merged_assigned)
            if acting_user_id is not None:
                values['updated_by_id'] = acting_user_id

            if values and not cls._conditional_update(license, read_assigned, values):
                raise Conflict(f"License {license.id} seats changed by another request; retry")

            ActivityRecorder.record(
                'update', ItemType.LICENSE, license.id, acting_user_id,
                f'License "{license.name}" updated'
            )
            return license

    @classmethod
    def delete_license(cls, license_id, acting_user_id=None, commit: bool = True) -> int:
        """
        Delete a license and its assignment history.

        Assignments reference the license, so they are removed first.

        Returns:
            Number of assignment rows removed
        """
        with unit_of_work(commit):
            license = cls.get_license(license_id)
            name, deleted_id = license.name, license.id

            removed = LicenseAssignment.query.filter(
                LicenseAssignment.license_id == deleted_id
            ).delete(synchronize_session=False)
            License.query.filter(License.id == deleted_id).delete(synchronize_session=False)
            db.session.expunge(license)

            ActivityRecorder.record(
                'delete', ItemType.LICENSE, deleted_id, acting_user_id,
                f'License "{name}" deleted'
            )
            logger.info(f"License {deleted_id} deleted with {removed} assignments")
            return removed

    @classmethod
    def get_assignments(cls, license_id) -> List[LicenseAssignment]:
        license = cls.get_license(license_id)
        return LicenseAssignment.query.filter_by(license_id=license.id).order_by(
            LicenseAssignment.assigned_date, LicenseAssignment.id
        ).all()

    @classmethod
    def refresh_expired_statuses(cls, acting_user_id=None, today: Optional[date] = None,
                                 commit: bool = True) -> List[License]:
        """
        Re-derive status for licenses whose expiration date passed since
        their last write.

        Returns:
            Licenses moved to expired
        """
        if today is None:
            today = date.today()
        with unit_of_work(commit):
            stale = License.query.filter(
                License.expiration_date.isnot(None),
                License.expiration_date < today,
                License.status != LicenseStatus.EXPIRED
            ).order_by(License.id).all()

            refreshed = []
            for license in stale:
                read_assigned = license.assigned_seats or 0
                values = {'status': recompute_status(license.expiration_date, read_assigned, today)}
                if not cls._conditional_update(license, read_assigned, values):
                    logger.warning(f"License {license.id} changed during status refresh, skipped")
                    continue
                ActivityRecorder.record(
                    'update', ItemType.LICENSE, license.id, acting_user_id,
                    f'License "{license.name}" expired'
                )
                refreshed.append(license)

            logger.info(f"Refreshed {len(refreshed)} expired licenses")
            return refreshed

