"""models/issue_record.py — SQLAlchemy model for one stored optimization issue."""
from extensions import db
from models.issue import Category, Issue, Severity


class IssueRecord(db.Model):
    __tablename__ = "issue"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    scan_id = db.Column(db.String(8), db.ForeignKey("scan.id"), nullable=False)
    position = db.Column(db.Integer, nullable=False)   # Rank in the sorted report
    rule_id = db.Column(db.String(8))
    severity = db.Column(db.String(16))   # 'critical' | 'warning' | 'info'
    category = db.Column(db.String(16))   # 'mesh' | 'texture' | 'material' | 'blueprint' | ...
    title = db.Column(db.String(255))
    description = db.Column(db.Text)
    impact = db.Column(db.Float)
    asset_path = db.Column(db.String(512))
    suggested_fix = db.Column(db.Text)

    @classmethod
    def from_issue(cls, scan_id: str, position: int, issue: Issue) -> "IssueRecord":
        return cls(
            scan_id=scan_id,
            position=position,
            rule_id=issue.rule_id,
            severity=issue.severity.value,
            category=issue.category.value,
            title=issue.title,
            description=issue.description,
            impact=issue.impact,
            asset_path=issue.asset_path,
            suggested_fix=issue.suggested_fix,
        )

    def to_issue(self) -> Issue:
        return Issue(
            rule_id=self.rule_id,
            title=self.title,
            description=self.description,
            category=Category(self.category),
            severity=Severity(self.severity),
            impact=self.impact,
            asset_path=self.asset_path,
            suggested_fix=self.suggested_fix or "",
        )

    def to_dict(self):
        return {
            "rule_id": self.rule_id,
            "severity": self.severity,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "impact": round(self.impact, 2) if self.impact is not None else None,
            "asset_path": self.asset_path,
            "suggested_fix": self.suggested_fix,
        }

    def __repr__(self):
        return f"<IssueRecord [{self.severity}] {self.title}>"
