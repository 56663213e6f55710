from asset_tracker.data.core.user_created_base import UserCreatedBase
from asset_tracker import db


class LicenseStatus:
    ACTIVE = 'active'
    UNUSED = 'unused'
    EXPIRED = 'expired'

    ALL = {ACTIVE, UNUSED, EXPIRED}


UNLIMITED_SEATS = 'Unlimited'


class License(UserCreatedBase):
    __tablename__ = 'licenses'

    name = db.Column(db.String(200), nullable=False)
    key = db.Column(db.String(255), nullable=True)
    seats = db.Column(db.String(20), nullable=False, default='1')
    assigned_seats = db.Column(db.Integer, nullable=False, default=0)
    expiration_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=LicenseStatus.UNUSED)
    manufacturer = db.Column(db.String(100), nullable=True)
    purchase_date = db.Column(db.Date, nullable=True)
    purchase_cost = db.Column(db.String(50), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    assignments = db.relationship('LicenseAssignment', back_populates='license', lazy='dynamic')

    @property
    def is_unlimited(self):
        return self.seats == UNLIMITED_SEATS

    @property
    def seat_limit(self):
        """Numeric seat capacity, or None for unlimited licenses"""
        if self.is_unlimited:
            return None
        return int(self.seats)

    def __repr__(self):
        return f'<License {self.name} ({self.assigned_seats}/{self.seats})>'
