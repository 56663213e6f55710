from asset_tracker.data.core.user_created_base import UserCreatedBase
from asset_tracker import db


class AssetStatus:
    AVAILABLE = 'available'
    DEPLOYED = 'deployed'
    PENDING = 'pending'
    OVERDUE = 'overdue'
    ARCHIVED = 'archived'

    ALL = {AVAILABLE, DEPLOYED, PENDING, OVERDUE, ARCHIVED}
    # Statuses in which the asset is held by someone
    CHECKED_OUT = {DEPLOYED, OVERDUE}
    # A knox ID on an asset in one of these is an orphan
    AT_REST = {AVAILABLE, PENDING, ARCHIVED}


class Asset(UserCreatedBase):
    __tablename__ = 'assets'

    asset_tag = db.Column(db.String(100), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=AssetStatus.AVAILABLE, index=True)
    serial_number = db.Column(db.String(100), nullable=True)
    model = db.Column(db.String(100), nullable=True)
    manufacturer = db.Column(db.String(100), nullable=True)
    location = db.Column(db.String(100), nullable=True)
    purchase_date = db.Column(db.Date, nullable=True)
    purchase_cost = db.Column(db.String(50), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    knox_id = db.Column(db.String(100), nullable=True, index=True)
    assigned_to = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    checkout_date = db.Column(db.Date, nullable=True)
    expected_checkin_date = db.Column(db.Date, nullable=True)
    finance_updated = db.Column(db.Boolean, nullable=False, default=False)

    assignee = db.relationship('User', foreign_keys=[assigned_to])

    @property
    def is_checked_out(self):
        return self.status in AssetStatus.CHECKED_OUT

    def __repr__(self):
        return f'<Asset {self.name} ({self.asset_tag})>'
