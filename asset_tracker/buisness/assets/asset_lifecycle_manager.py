"""
AssetLifecycleManager - owns asset status transitions

Responsibilities:
- Checkout / checkin
- Knox-ID-triggered auto-checkout (see KnoxAssignmentRule)
- Orphan Knox ID cleanup
- Asset create / edit / delete / import with asset tag uniqueness

Status writes are conditional updates keyed on the status that was read
(UPDATE ... WHERE id = :id AND status = :read_status), so two requests racing
on the same asset cannot both pass validation and both write. Each public
method is one unit of work.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from asset_tracker import db
from asset_tracker.buisness.assets.asset_status_validator import AssetStatusValidator
from asset_tracker.buisness.assets.knox_assignment_rule import KnoxAssignmentRule
from asset_tracker.buisness.core.activity_recorder import ActivityRecorder, ItemType
from asset_tracker.buisness.core.exceptions import (
    Conflict,
    InvalidTransition,
    NotFound,
    ValidationError,
)
from asset_tracker.buisness.core.unit_of_work import unit_of_work
from asset_tracker.buisness.core.validation import (
    ASSET_FIELD_PARSERS,
    ensure_unique_asset_tag,
    normalize_knox_id,
    parse_bool,
    parse_date,
    parse_id,
    validate_fields,
)
from asset_tracker.data.core.asset_info.asset import Asset, AssetStatus
from asset_tracker.data.core.user_info.user import User
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.buisness.assets.lifecycle")

# Holder fields are written only by checkout and checkin
HOLDER_FIELDS = ['assigned_to', 'checkout_date']


class AssetLifecycleManager:
    """Business logic for asset lifecycle transitions"""

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def get_asset(asset_id) -> Asset:
        asset = db.session.get(Asset, parse_id(asset_id, 'asset_id'))
        if asset is None:
            raise NotFound(f"Asset {asset_id} not found")
        return asset

    @staticmethod
    def _get_user(user_id) -> User:
        if user_id is None or user_id == '':
            raise ValidationError("User ID is required")
        user = db.session.get(User, parse_id(user_id, 'user_id'))
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    @staticmethod
    def _conditional_update(asset: Asset, read_status: str, values: Dict[str, Any], **extra_criteria) -> bool:
        """
        Write ``values`` only if the asset still has the status we validated against.

        Returns:
            True if the row was updated
        """
        query = Asset.query.filter(Asset.id == asset.id, Asset.status == read_status)
        for column, expected in extra_criteria.items():
            column_attr = getattr(Asset, column)
            query = query.filter(column_attr.is_(None) if expected is None else column_attr == expected)

        count = query.update(values, synchronize_session=False)
        # Reload on next access so callers see what was written
        db.session.expire(asset)
        return count == 1

    # ------------------------------------------------------------------
    # Checkout / checkin
    # ------------------------------------------------------------------

    @classmethod
    def checkout(
        cls,
        asset_id,
        acting_user_id,
        expected_checkin_date=None,
        notes: Optional[str] = None,
        knox_id: Optional[str] = None,
        commit: bool = True
    ) -> Asset:
        """
        Check an available asset out to a user.

        Args:
            asset_id: Asset to check out
            acting_user_id: User who receives the asset
            expected_checkin_date: Optional return date (date or ISO string)
            notes: Activity note; generated when omitted
            knox_id: Optional Knox ID written together with the checkout
            commit: Whether to commit the transaction

        Raises:
            NotFound: asset or user missing
            InvalidTransition: asset is not available
        """
        expected_checkin_date = parse_date(expected_checkin_date, 'expected_checkin_date')
        knox_id = normalize_knox_id(knox_id)

        with unit_of_work(commit):
            asset = cls.get_asset(asset_id)
            cls.checkout_staged(asset, acting_user_id, expected_checkin_date, notes, knox_id)
            return asset

    @classmethod
    def checkout_staged(
        cls,
        asset: Asset,
        acting_user_id,
        expected_checkin_date: Optional[date] = None,
        notes: Optional[str] = None,
        knox_id: Optional[str] = None
    ) -> Asset:
        """Checkout inside an already open unit of work"""
        user = cls._get_user(acting_user_id)
        read_status = asset.status

        if not AssetStatusValidator.can_checkout(read_status):
            raise InvalidTransition(
                f"Asset {asset.asset_tag} cannot be checked out while {read_status}"
            )

        values = {
            'status': AssetStatus.DEPLOYED,
            'assigned_to': user.id,
            'checkout_date': date.today(),
            'expected_checkin_date': expected_checkin_date,
            'updated_by_id': user.id,
        }
        if knox_id:
            values['knox_id'] = knox_id

        if not cls._conditional_update(asset, read_status, values):
            raise InvalidTransition(
                f"Asset {asset.asset_tag} was changed by another request and can no longer be checked out"
            )

        if not notes:
            if knox_id:
                notes = f"Asset checked out to {user.display_name} (KnoxID: {knox_id})"
            else:
                notes = f"Asset {asset.name} ({asset.asset_tag}) checked out to {user.display_name}"

        ActivityRecorder.record('checkout', ItemType.ASSET, asset.id, user.id, notes)
        logger.info(f"Asset {asset.asset_tag} (ID: {asset.id}) checked out to user {user.id}")
        return asset

    @classmethod
    def checkin(cls, asset_id, acting_user_id=None, commit: bool = True) -> Asset:
        """
        Return a checked-out asset.

        Clears the holder fields and the Knox ID and makes the asset available.

        Raises:
            NotFound: asset missing
            InvalidTransition: asset is not deployed or overdue
        """
        with unit_of_work(commit):
            asset = cls.get_asset(asset_id)
            read_status = asset.status

            if not AssetStatusValidator.can_checkin(read_status):
                raise InvalidTransition(
                    f"Asset {asset.asset_tag} cannot be checked in while {read_status}"
                )

            previous_holder = asset.assigned_to
            values = {
                'status': AssetStatus.AVAILABLE,
                'assigned_to': None,
                'checkout_date': None,
                'expected_checkin_date': None,
                'knox_id': None,
            }
            if acting_user_id is not None:
                values['updated_by_id'] = acting_user_id

            if not cls._conditional_update(asset, read_status, values):
                raise InvalidTransition(
                    f"Asset {asset.asset_tag} was changed by another request and can no longer be checked in"
                )

            ActivityRecorder.record(
                'checkin', ItemType.ASSET, asset.id,
                acting_user_id if acting_user_id is not None else previous_holder,
                f"Asset {asset.name} ({asset.asset_tag}) checked in"
            )
            logger.info(f"Asset {asset.asset_tag} (ID: {asset.id}) checked in")
            return asset

    # ------------------------------------------------------------------
    # Knox ID rule
    # ------------------------------------------------------------------

    @classmethod
    def apply_knox_assignment(cls, asset_id, knox_id, acting_user_id, commit: bool = True) -> Asset:
        """
        Apply the Knox auto-checkout rule to one asset.

        Idempotent: an asset already held under ``knox_id`` is left untouched
        and no activity is recorded.
        """
        knox_id = normalize_knox_id(knox_id)
        if not knox_id:
            raise ValidationError("knox_id is required")

        with unit_of_work(commit):
            asset = cls.get_asset(asset_id)
            if KnoxAssignmentRule.apply(asset, knox_id, acting_user_id):
                logger.info(f"Knox ID {knox_id} checked out asset {asset.asset_tag}")
            else:
                logger.debug(f"Asset {asset.asset_tag} already held under Knox ID {knox_id}")
            return asset

    @classmethod
    def _check_knox_preconditions(cls, knox_id: Optional[str], acting_user_id, status_after_write: str,
                                  asset: Optional[Asset] = None) -> bool:
        """
        Validate, before any write, that a Knox ID write can run its checkout.

        Returns:
            True if the write will trigger a checkout
        """
        if not knox_id:
            return False
        if asset is not None and KnoxAssignmentRule.already_satisfied(asset, knox_id):
            return False
        if acting_user_id is None:
            raise ValidationError("An acting user is required to check out an asset by Knox ID")
        cls._get_user(acting_user_id)
        if not AssetStatusValidator.can_checkout(status_after_write):
            raise InvalidTransition(
                f"Knox ID {knox_id} cannot be assigned to an asset that is {status_after_write}; check it in first"
            )
        return True

    @classmethod
    def cleanup_orphan_knox_ids(cls, acting_user_id=None, commit: bool = True) -> List[Asset]:
        """
        Clear Knox IDs left on assets that are not checked out.

        Touches exactly the assets whose status is available, pending or
        archived and whose knox_id is set. Records one activity per
        correction plus one summary activity.

        Returns:
            The corrected assets
        """
        with unit_of_work(commit):
            orphans = Asset.query.filter(
                Asset.status.in_(AssetStatus.AT_REST),
                Asset.knox_id.isnot(None),
                Asset.knox_id != ''
            ).order_by(Asset.id).all()

            corrected = []
            for asset in orphans:
                read_status, read_knox = asset.status, asset.knox_id
                values = {'knox_id': None}
                if acting_user_id is not None:
                    values['updated_by_id'] = acting_user_id
                if not cls._conditional_update(asset, read_status, values, knox_id=read_knox):
                    logger.warning(f"Asset {asset.id} changed during Knox cleanup, skipped")
                    continue
                ActivityRecorder.record(
                    'cleanup-knox', ItemType.ASSET, asset.id, acting_user_id,
                    f"Cleared orphan Knox ID {read_knox} from asset {asset.asset_tag} ({read_status})"
                )
                corrected.append(asset)

            ActivityRecorder.record(
                'cleanup-knox', ItemType.ASSET, 0, acting_user_id,
                f"Cleaned up Knox IDs for {len(corrected)} assets that were not checked out"
            )
            logger.info(f"Knox cleanup corrected {len(corrected)} assets")
            return corrected

    # ------------------------------------------------------------------
    # Create / edit / delete
    # ------------------------------------------------------------------

    @classmethod
    def create_asset(cls, data: Dict[str, Any], acting_user_id=None, commit: bool = True) -> Asset:
        """
        Create an asset in the available status.

        A non-empty knox_id checks the new asset out to the acting user in
        the same unit of work.

        Raises:
            ValidationError: malformed or missing fields
            Conflict: duplicate asset tag
        """
        with unit_of_work(commit):
            return cls._create_staged(data, acting_user_id, set())

    @classmethod
    def _create_staged(cls, data: Dict[str, Any], acting_user_id, batch_tags: set) -> Asset:
        fields = validate_fields(
            data, ASSET_FIELD_PARSERS,
            required=('asset_tag', 'name'),
            rejected=HOLDER_FIELDS
        )

        status = fields.pop('status', AssetStatus.AVAILABLE)
        if status != AssetStatus.AVAILABLE:
            raise ValidationError("New assets are created as available; use checkout to deploy them")

        knox_id = fields.pop('knox_id', None)
        expected_checkin_date = fields.pop('expected_checkin_date', None)
        if expected_checkin_date and not knox_id:
            raise ValidationError("expected_checkin_date requires a checkout")

        if fields['asset_tag'] in batch_tags:
            raise Conflict(f"Asset tag '{fields['asset_tag']}' appears more than once")
        ensure_unique_asset_tag(fields['asset_tag'])
        cls._check_knox_preconditions(knox_id, acting_user_id, AssetStatus.AVAILABLE)
        batch_tags.add(fields['asset_tag'])

        asset = Asset.from_dict(dict(fields, status=AssetStatus.AVAILABLE), acting_user_id)
        db.session.add(asset)

        # Flush to get ID before recording activity
        db.session.flush()

        ActivityRecorder.record(
            'create', ItemType.ASSET, asset.id, acting_user_id,
            f"Asset {asset.name} ({asset.asset_tag}) created"
        )
        KnoxAssignmentRule.apply(asset, knox_id, acting_user_id, expected_checkin_date)

        logger.info(f"Asset staged: {asset.name} (ID: {asset.id})")
        return asset

    @classmethod
    def update_asset(cls, asset_id, data: Dict[str, Any], acting_user_id=None, commit: bool = True) -> Asset:
        """
        Edit an asset.

        Status may only move between resting statuses, or between deployed
        and overdue. A changed, non-empty knox_id runs the Knox rule after
        the field write, in the same unit of work.

        Raises:
            NotFound, ValidationError, InvalidTransition, Conflict
        """
        with unit_of_work(commit):
            asset = cls.get_asset(asset_id)
            fields = validate_fields(data, ASSET_FIELD_PARSERS, rejected=HOLDER_FIELDS)
            read_status = asset.status

            new_status = fields.get('status', read_status)
            if not AssetStatusValidator.can_edit_to(read_status, new_status):
                raise InvalidTransition(
                    f"Asset {asset.asset_tag} cannot move from {read_status} to {new_status} by edit"
                )

            if fields.get('expected_checkin_date') and new_status not in AssetStatus.CHECKED_OUT:
                raise InvalidTransition("expected_checkin_date can only be set on a checked-out asset")

            if 'asset_tag' in fields and fields['asset_tag'] != asset.asset_tag:
                ensure_unique_asset_tag(fields['asset_tag'], exclude_id=asset.id)

            knox_supplied = 'knox_id' in fields
            knox_id = fields.pop('knox_id', None)
            triggers_checkout = cls._check_knox_preconditions(knox_id, acting_user_id, new_status, asset)

            # Plain knox writes (clearing, or re-submitting the held value) go with the other fields
            if knox_supplied and not triggers_checkout:
                fields['knox_id'] = knox_id

            changes = [key for key, value in fields.items() if getattr(asset, key) != value]
            if changes:
                values = dict(fields)
                if acting_user_id is not None:
                    values['updated_by_id'] = acting_user_id
                if not cls._conditional_update(asset, read_status, values):
                    raise Conflict(f"Asset {asset.asset_tag} was changed by another request")

                ActivityRecorder.record(
                    'update', ItemType.ASSET, asset.id, acting_user_id,
                    f"Asset {asset.name} ({asset.asset_tag}) updated: {', '.join(sorted(changes))}"
                )

            if triggers_checkout:
                KnoxAssignmentRule.apply(asset, knox_id, acting_user_id)

            logger.info(f"Asset {asset.asset_tag} (ID: {asset.id}) updated")
            return asset

    @classmethod
    def set_finance_updated(cls, asset_id, finance_updated, acting_user_id=None, commit: bool = True) -> Asset:
        """Flag whether finance has booked the asset"""
        flag = parse_bool(finance_updated, 'finance_updated')
        with unit_of_work(commit):
            asset = cls.get_asset(asset_id)
            asset.finance_updated = flag
            if acting_user_id is not None:
                asset.updated_by_id = acting_user_id
            ActivityRecorder.record(
                'update', ItemType.ASSET, asset.id, acting_user_id,
                f"Finance status updated to: {'Updated' if flag else 'Not Updated'}"
            )
            return asset

    @classmethod
    def delete_asset(cls, asset_id, acting_user_id=None, commit: bool = True) -> None:
        with unit_of_work(commit):
            asset = cls.get_asset(asset_id)
            name, tag, deleted_id = asset.name, asset.asset_tag, asset.id
            db.session.delete(asset)
            ActivityRecorder.record(
                'delete', ItemType.ASSET, deleted_id, acting_user_id,
                f"Asset {name} ({tag}) deleted"
            )
            logger.info(f"Asset {tag} (ID: {deleted_id}) deleted")

    @classmethod
    def import_assets(cls, rows: List[Dict[str, Any]], acting_user_id=None, commit: bool = True) -> List[Asset]:
        """
        Create many assets at once. Either every row is created or none is.

        Raises:
            ValidationError: empty batch or a malformed row (message names the row)
            Conflict: duplicate asset tag in the batch or the collection
        """
        if not isinstance(rows, list):
            raise ValidationError("Invalid request format. Expected an array of assets.")
        if not rows:
            raise ValidationError("No assets to import")

        created = []
        batch_tags = set()
        with unit_of_work(commit):
            for index, row in enumerate(rows, start=1):
                try:
                    created.append(cls._create_staged(row, acting_user_id, batch_tags))
                except ValidationError as e:
                    raise ValidationError(f"Row {index}: {e.message}") from e
            logger.info(f"Imported {len(created)} assets")
        return created
