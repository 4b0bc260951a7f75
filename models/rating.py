from extensions import db
from sqlalchemy import CheckConstraint


class Rating(db.Model):
    __tablename__ = 'ratings'
    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(db.Integer, db.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False)
    judge_id = db.Column(db.Integer, db.ForeignKey('judges.id', ondelete='CASCADE'), nullable=False)
    criterion_id = db.Column(db.Integer, db.ForeignKey('criteria.id', ondelete='CASCADE'), nullable=False)
    score = db.Column(db.Float, nullable=False)
    scored_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    __table_args__ = (
        # Одна актуальная оценка на тройку (проект, судья, критерий)
        db.UniqueConstraint('project_id', 'judge_id', 'criterion_id', name='unique_rating'),
        CheckConstraint("score >= 1 AND score <= 10", name="check_rating_score"),
    )
