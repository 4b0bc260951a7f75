# routes/admin.py

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from extensions import db
from models import Judge, Project, Criterion
from logic import load_snapshot, reset_evaluations, SnapshotUnavailable
from scoring import judge_summary
from seed_data import seed_demo_data
from state import admin_required


admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


@admin_bp.route('/')
@admin_required
def dashboard():
    return redirect(url_for('admin.manage_judges'))


# --- Судьи ---
@admin_bp.route('/judges', methods=['GET', 'POST'])
@admin_required
def manage_judges():
    if request.method == 'POST':
        name = (request.form.get('name') or '').strip()
        password = (request.form.get('password') or '').strip()

        if not name or not password:
            flash('Имя и пароль судьи являются обязательными полями.', 'error')
        else:
            new_judge = Judge(name=name)
            new_judge.set_password(password)
            db.session.add(new_judge)
            try:
                db.session.commit()
                current_app.logger.info('Создан судья %s', name)
                flash(f'Судья {name} успешно создан!', 'success')
            except IntegrityError:
                db.session.rollback()
                flash(f'Ошибка! Судья с именем {name} уже существует.', 'error')
        return redirect(url_for('admin.manage_judges'))

    judges = Judge.query.order_by(Judge.name).all()
    completed = {}
    try:
        snapshot = load_snapshot()
        for j in judges:
            completed[j.id] = judge_summary(
                j.id, snapshot.projects, snapshot.criteria, snapshot.ratings, snapshot.comments
            )
        projects_count = len(snapshot.projects)
    except SnapshotUnavailable as e:
        flash(str(e), 'error')
        projects_count = 0
    return render_template('admin/judges.html',
                           judges=judges,
                           completed=completed,
                           projects_count=projects_count)


@admin_bp.route('/judge/<int:judge_id>/delete', methods=['POST'])
@admin_required
def delete_judge(judge_id):
    judge_to_delete = Judge.query.get_or_404(judge_id)
    try:
        db.session.delete(judge_to_delete)
        db.session.commit()
        current_app.logger.info('Удален судья %s', judge_to_delete.name)
        flash('Судья и его оценки успешно удалены.', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Произошла ошибка при удалении: {e}', 'error')
    return redirect(url_for('admin.manage_judges'))


# --- Проекты ---
@admin_bp.route('/projects', methods=['GET', 'POST'])
@admin_required
def manage_projects():
    if request.method == 'POST':
        name = (request.form.get('name') or '').strip()
        if not name:
            flash('Название проекта является обязательным полем.', 'error')
        else:
            db.session.add(Project(name=name))
            try:
                db.session.commit()
                current_app.logger.info('Создан проект %s', name)
                flash(f'Проект "{name}" успешно создан.', 'success')
            except IntegrityError:
                db.session.rollback()
                flash(f'Проект с названием "{name}" уже существует.', 'error')
        return redirect(url_for('admin.manage_projects'))

    projects = Project.query.order_by(Project.name).all()
    return render_template('admin/projects.html', projects=projects)


@admin_bp.route('/project/<int:project_id>/delete', methods=['POST'])
@admin_required
def delete_project(project_id):
    project_to_delete = Project.query.get_or_404(project_id)
    try:
        db.session.delete(project_to_delete)
        db.session.commit()
        current_app.logger.info('Удален проект %s', project_to_delete.name)
        flash(f'Проект "{project_to_delete.name}" успешно удален.', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Произошла ошибка при удалении: {e}', 'error')
    return redirect(url_for('admin.manage_projects'))


# --- Критерии ---
@admin_bp.route('/criteria', methods=['GET', 'POST'])
@admin_required
def manage_criteria():
    if request.method == 'POST':
        name = (request.form.get('name') or '').strip()

        # Новый критерий встает в конец списка
        max_order = db.session.query(func.max(Criterion.order)).scalar()
        order = (max_order or 0) + 1

        if not name:
            flash('Название критерия является обязательным полем.', 'error')
        else:
            db.session.add(Criterion(name=name, order=order))
            try:
                db.session.commit()
                current_app.logger.info('Создан критерий %s', name)
                flash(f'Критерий "{name}" успешно создан.', 'success')
            except IntegrityError:
                db.session.rollback()
                flash('Критерий с таким названием уже существует.', 'error')
        return redirect(url_for('admin.manage_criteria'))

    criteria = Criterion.query.order_by(Criterion.order, Criterion.name).all()
    return render_template('admin/criteria.html', criteria=criteria)


@admin_bp.route('/criterion/<int:criterion_id>/delete', methods=['POST'])
@admin_required
def delete_criterion(criterion_id):
    criterion_to_delete = Criterion.query.get_or_404(criterion_id)
    try:
        db.session.delete(criterion_to_delete)
        db.session.commit()
        current_app.logger.info('Удален критерий %s', criterion_to_delete.name)
        flash(f'Критерий "{criterion_to_delete.name}" успешно удален.', 'success')
    except SQLAlchemyError as e:
        db.session.rollback()
        flash(f'Произошла непредвиденная ошибка: {e}', 'error')
    return redirect(url_for('admin.manage_criteria'))


# --- Служебные действия ---
@admin_bp.route('/seed', methods=['POST'])
@admin_required
def seed():
    try:
        created = seed_demo_data()
        flash(f'Демонстрационные данные загружены (новых записей: {created}).', 'success')
    except SQLAlchemyError as e:
        flash(f'Ошибка загрузки данных: {e}', 'error')
    return redirect(url_for('admin.manage_judges'))


@admin_bp.route('/reset', methods=['POST'])
@admin_required
def reset():
    try:
        ratings_deleted, comments_deleted = reset_evaluations()
        flash(f'Оценки сброшены: удалено {ratings_deleted} оценок и {comments_deleted} комментариев.', 'success')
    except SQLAlchemyError as e:
        flash(f'Ошибка при сбросе оценок: {e}', 'error')
    return redirect(url_for('admin.manage_judges'))
