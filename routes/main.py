from flask import Blueprint, render_template, redirect, url_for, flash, request, jsonify
from sqlalchemy.exc import SQLAlchemyError
from models import Judge, Project, Criterion, Rating, Comment
from logic import (
    load_snapshot, save_evaluation, get_ranking_board, SnapshotUnavailable,
    MIN_SCORE, MAX_SCORE, SCORE_STEP,
)
from scoring import build_project_reports, judge_progress, judge_summary
from state import load_auth_state, login_required, judge_required


main_bp = Blueprint('main', __name__)

DEFAULT_SLIDER_SCORE = 5


@main_bp.route('/')
def index():
    return render_template('index.html')


@main_bp.route('/ranking')
def ranking():
    # Каждый заход (ручной или по таймеру страницы) пересчитывает рейтинг
    board = get_ranking_board()
    if not board.refresh():
        flash('Не удалось обновить рейтинг, показаны последние данные.', 'warning')
    return render_template('ranking.html', board=board)


@main_bp.route('/api/ranking')
def api_ranking():
    board = get_ranking_board()
    board.refresh()
    return jsonify(board.as_dict())


@main_bp.route('/print')
@login_required
def print_reports():
    try:
        snapshot = load_snapshot()
        judge_names = {j.id: j.name for j in Judge.query.all()}
    except (SnapshotUnavailable, SQLAlchemyError) as e:
        flash(f'Не удалось загрузить отчеты: {e}', 'error')
        return redirect(url_for('main.index'))

    reports = build_project_reports(
        snapshot.projects, snapshot.criteria, snapshot.ratings, snapshot.comments
    )
    return render_template('print.html', reports=reports, judge_names=judge_names)


@main_bp.route('/judge')
@judge_required
def judge_panel():
    judge_id = load_auth_state().judge_id
    try:
        snapshot = load_snapshot()
    except SnapshotUnavailable as e:
        flash(str(e), 'error')
        return redirect(url_for('main.index'))

    projects_progress = [
        (p, judge_progress(judge_id, p.id, snapshot.criteria, snapshot.ratings, snapshot.comments))
        for p in snapshot.projects
    ]
    completed = judge_summary(
        judge_id, snapshot.projects, snapshot.criteria, snapshot.ratings, snapshot.comments
    )
    return render_template('judge/panel.html',
                           projects_progress=projects_progress,
                           completed=completed,
                           total_projects=len(snapshot.projects))


@main_bp.route('/judge/project/<int:project_id>', methods=['GET', 'POST'])
@judge_required
def evaluate_project(project_id):
    judge_id = load_auth_state().judge_id
    project = Project.query.get_or_404(project_id)
    criteria = Criterion.query.order_by(Criterion.order, Criterion.name).all()

    if request.method == 'POST':
        raw_scores = {c.id: request.form.get(f'scores[{c.id}]') for c in criteria}
        try:
            save_evaluation(judge_id, project.id, raw_scores, request.form.get('comment'))
            flash('Оценка успешно сохранена!', 'success')
        except ValueError as e:
            flash(str(e), 'error')
        except SQLAlchemyError:
            flash('Ошибка при сохранении. Попробуйте еще раз.', 'error')
        return redirect(url_for('main.evaluate_project', project_id=project.id))

    scores_map = {
        r.criterion_id: r.score
        for r in Rating.query.filter_by(judge_id=judge_id, project_id=project.id)
    }
    comment = Comment.query.filter_by(judge_id=judge_id, project_id=project.id).first()

    return render_template('judge/evaluate.html',
                           project=project,
                           criteria=criteria,
                           scores_map=scores_map,
                           comment_text=comment.text if comment else '',
                           default_score=DEFAULT_SLIDER_SCORE,
                           min_score=MIN_SCORE,
                           max_score=MAX_SCORE,
                           score_step=SCORE_STEP)
