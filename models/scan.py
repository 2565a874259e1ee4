"""models/scan.py — SQLAlchemy model for stored scan runs."""
import datetime
import json

from extensions import db


class Scan(db.Model):
    __tablename__ = "scan"

    id = db.Column(db.String(8), primary_key=True)          # e.g. 'A3F8B21C'
    mode = db.Column(db.String(16), nullable=False)         # 'catalogue' | 'scene'
    scanned_at = db.Column(db.DateTime, default=datetime.datetime.utcnow, index=True)
    thresholds = db.Column(db.Text)                         # JSON snapshot of the thresholds used
    issue_count = db.Column(db.Integer, default=0)
    critical_count = db.Column(db.Integer, default=0)
    warning_count = db.Column(db.Integer, default=0)
    info_count = db.Column(db.Integer, default=0)
    max_impact = db.Column(db.Float, default=0.0)
    report_path = db.Column(db.String(512))                 # Absolute path to JSON report

    issues = db.relationship("IssueRecord", backref="scan", lazy=True,
                             cascade="all, delete-orphan",
                             order_by="IssueRecord.position")

    def to_summary(self):
        return {
            "scan_id": self.id,
            "mode": self.mode,
            "scanned_at": self.scanned_at.isoformat() + "Z" if self.scanned_at else None,
            "issue_count": self.issue_count,
            "severity_counts": {
                "critical": self.critical_count,
                "warning": self.warning_count,
                "info": self.info_count,
            },
            "max_impact": self.max_impact,
        }

    def to_dict(self):
        data = self.to_summary()
        data["thresholds"] = json.loads(self.thresholds) if self.thresholds else {}
        data["report_path"] = self.report_path
        data["issues"] = [record.to_dict() for record in self.issues]
        return data

    def __repr__(self):
        return f"<Scan {self.id} mode={self.mode} issues={self.issue_count}>"
