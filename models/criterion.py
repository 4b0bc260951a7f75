# models/criterion.py

from extensions import db


class Criterion(db.Model):
    __tablename__ = 'criteria'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    # Порядок колонок в рейтинге и в форме оценки
    order = db.Column(db.Integer, nullable=False)

    ratings = db.relationship('Rating', backref='criterion', lazy=True, cascade="all, delete")
