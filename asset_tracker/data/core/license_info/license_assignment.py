from asset_tracker import db
from datetime import datetime
from asset_tracker.buisness.core.data_insertion_mixin import DataInsertionMixin

class LicenseAssignment(db.Model, DataInsertionMixin):
    """One granted seat of a license. Rows are never edited, only removed with their license."""
    __tablename__ = 'license_assignments'

    id = db.Column(db.Integer, primary_key=True)
    license_id = db.Column(db.Integer, db.ForeignKey('licenses.id'), nullable=False, index=True)
    assigned_to = db.Column(db.String(200), nullable=False)
    assigned_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    notes = db.Column(db.Text, nullable=True)

    license = db.relationship('License', back_populates='assignments')

    def __repr__(self):
        return f'<LicenseAssignment license:{self.license_id} -> {self.assigned_to}>'
