# logic.py
# Работа с базой: снимок данных для подсчета, сохранение оценок, сброс,
# проверка судьи и табло рейтинга с автообновлением.

import math
from collections import namedtuple
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import Judge, Project, Criterion, Rating, Comment
from scoring import ProjectItem, CriterionItem, RatingItem, CommentItem, compute_ranking

Snapshot = namedtuple('Snapshot', ['projects', 'criteria', 'ratings', 'comments'])

MIN_SCORE = 1
MAX_SCORE = 10
SCORE_STEP = 0.5


class SnapshotUnavailable(Exception):
    """Не удалось получить данные из базы целиком."""


def list_projects():
    return [ProjectItem(p.id, p.name) for p in Project.query.order_by(Project.name).all()]


def list_criteria():
    return [
        CriterionItem(c.id, c.name)
        for c in Criterion.query.order_by(Criterion.order, Criterion.name).all()
    ]


def list_ratings():
    return [
        RatingItem(r.project_id, r.judge_id, r.criterion_id, r.score)
        for r in Rating.query.all()
    ]


def list_comments():
    return [CommentItem(c.project_id, c.judge_id, c.text) for c in Comment.query.all()]


def load_snapshot():
    """
    Загружает проекты, критерии, оценки и комментарии.
    Ошибка в любом из запросов означает ошибку всего снимка.
    """
    try:
        return Snapshot(
            projects=list_projects(),
            criteria=list_criteria(),
            ratings=list_ratings(),
            comments=list_comments(),
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        raise SnapshotUnavailable(f'Ошибка соединения с базой данных: {e}') from e


def parse_score(raw):
    try:
        score = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f'Некорректная оценка: {raw!r}.')

    if not math.isfinite(score) or score < MIN_SCORE or score > MAX_SCORE:
        raise ValueError(f'Оценка должна быть от {MIN_SCORE} до {MAX_SCORE}.')
    if not (score / SCORE_STEP).is_integer():
        raise ValueError(f'Оценка должна быть кратна {SCORE_STEP}.')
    return score


def save_evaluation(judge_id, project_id, raw_scores, comment_text):
    """
    Сохраняет оценки судьи по всем критериям и комментарий к проекту.

    raw_scores: {criterion_id: значение}. Существующие строки обновляются
    в той же транзакции, так что у тройки (проект, судья, критерий)
    всегда ровно одна актуальная оценка.
    """
    criteria = Criterion.query.order_by(Criterion.order, Criterion.name).all()
    if not criteria:
        raise ValueError('Критерии оценки еще не заданы.')

    scores = {}
    for c in criteria:
        raw = raw_scores.get(c.id)
        if raw is None or str(raw).strip() == '':
            raise ValueError(f'Необходимо выставить оценку по критерию "{c.name}".')
        scores[c.id] = parse_score(raw)

    text = (comment_text or '').strip()
    if not text:
        raise ValueError('Комментарий обязателен.')

    try:
        existing = {
            r.criterion_id: r
            for r in Rating.query.filter_by(judge_id=judge_id, project_id=project_id)
        }
        for criterion_id, score in scores.items():
            if criterion_id in existing:
                existing[criterion_id].score = score
            else:
                db.session.add(Rating(
                    judge_id=judge_id, project_id=project_id,
                    criterion_id=criterion_id, score=score
                ))

        comment = Comment.query.filter_by(judge_id=judge_id, project_id=project_id).first()
        if comment:
            comment.text = text
        else:
            db.session.add(Comment(judge_id=judge_id, project_id=project_id, text=text))

        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(
            'Не удалось сохранить оценку судьи %s для проекта %s', judge_id, project_id
        )
        raise

    current_app.logger.info('Судья %s сохранил оценку проекта %s', judge_id, project_id)


def reset_evaluations():
    """Удаляет все оценки и комментарии. Возвращает (оценок, комментариев)."""
    try:
        ratings_deleted = db.session.query(Rating).delete()
        comments_deleted = db.session.query(Comment).delete()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    current_app.logger.info(
        'Оценки сброшены: %s оценок, %s комментариев', ratings_deleted, comments_deleted
    )
    return ratings_deleted, comments_deleted


def authenticate_judge(name, password):
    name = (name or '').strip()
    if not name or not password:
        return None
    # lower() в SQLite не понимает кириллицу, поэтому сравниваем имена в Python
    for judge in Judge.query.all():
        if judge.name.strip().lower() == name.lower():
            return judge if judge.check_password(password) else None
    return None


class RankingBoard:
    """
    Последний посчитанный рейтинг.

    Каждое обновление пересчитывает все с нуля. Если данные получить
    не удалось, остается прошлый рейтинг с пометкой stale.
    """

    def __init__(self, loader=load_snapshot):
        self.loader = loader
        self.rows = []
        self.criteria = []
        self.updated_at = None
        self.stale = False
        self.error = None

    def refresh(self):
        try:
            snapshot = self.loader()
        except SnapshotUnavailable as e:
            current_app.logger.warning('Рейтинг не обновлен, показываем прошлые данные: %s', e)
            self.stale = True
            self.error = str(e)
            return False

        self.rows = compute_ranking(snapshot.projects, snapshot.criteria, snapshot.ratings)
        self.criteria = list(snapshot.criteria)
        self.updated_at = datetime.now()
        self.stale = False
        self.error = None
        return True

    def as_dict(self):
        return {
            'updated_at': self.updated_at.isoformat(timespec='seconds') if self.updated_at else None,
            'stale': self.stale,
            'error': self.error,
            'criteria': [{'id': c.id, 'name': c.name} for c in self.criteria],
            'rows': [
                {
                    'position': row['position'],
                    'project': {'id': row['project'].id, 'name': row['project'].name},
                    'scores': {str(cid): avg for cid, avg in row['scores'].items()},
                    'total': row['total'],
                }
                for row in self.rows
            ],
        }


def get_ranking_board():
    return current_app.extensions['ranking_board']
