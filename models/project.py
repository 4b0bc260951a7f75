# models/project.py
# Проект создается и удаляется администратором, в остальном не меняется

from extensions import db


class Project(db.Model):
    __tablename__ = 'projects'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.current_timestamp())

    ratings = db.relationship('Rating', backref='project', lazy=True, cascade="all, delete")
    comments = db.relationship('Comment', backref='project', lazy=True, cascade="all, delete")
