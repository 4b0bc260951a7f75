# scoring.py
# Подсчет рейтинга, отчетов по проектам и прогресса судьи.
# Чистые функции: на вход снимок данных, на выход списки словарей для шаблонов.

from collections import defaultdict, namedtuple

ProjectItem = namedtuple('ProjectItem', ['id', 'name'])
CriterionItem = namedtuple('CriterionItem', ['id', 'name'])
RatingItem = namedtuple('RatingItem', ['project_id', 'judge_id', 'criterion_id', 'score'])
CommentItem = namedtuple('CommentItem', ['project_id', 'judge_id', 'text'])


def _valid_ratings(ratings, project_ids, criterion_ids):
    """
    Отбрасывает оценки со ссылками на неизвестные проекты/критерии
    и с нечисловым значением. Такие строки просто не участвуют в подсчете.
    """
    for r in ratings:
        if r.project_id not in project_ids or r.criterion_id not in criterion_ids:
            continue
        try:
            score = float(r.score)
        except (TypeError, ValueError):
            continue
        yield r, score


def criterion_averages(projects, criteria, ratings):
    """
    Возвращает {project_id: {criterion_id: среднее}}.

    Среднее считается по всем строкам оценок проекта по критерию,
    независимо от судьи. Если оценок нет, среднее равно 0.
    """
    project_ids = {p.id for p in projects}
    criterion_ids = {c.id for c in criteria}

    sums = defaultdict(float)
    counts = defaultdict(int)
    for r, score in _valid_ratings(ratings, project_ids, criterion_ids):
        key = (r.project_id, r.criterion_id)
        sums[key] += score
        counts[key] += 1

    averages = {}
    for p in projects:
        averages[p.id] = {
            c.id: (sums[(p.id, c.id)] / counts[(p.id, c.id)]) if counts[(p.id, c.id)] else 0
            for c in criteria
        }
    return averages


def _tie_break_key(row):
    project = row['project']
    return (-row['total'], (project.name or '').lower(), str(project.id))


def compute_ranking(projects, criteria, ratings):
    """
    Строит рейтинг проектов.

    total = сумма средних по всем критериям (в порядке criteria).
    Сортировка по total по убыванию, при равенстве по имени проекта,
    затем по id. Пустой список проектов или критериев дает пустой рейтинг.
    """
    if not projects or not criteria:
        return []

    averages = criterion_averages(projects, criteria, ratings)
    project_ids = {p.id for p in projects}
    criterion_ids = {c.id for c in criteria}
    rating_counts = defaultdict(int)
    for r, _score in _valid_ratings(ratings, project_ids, criterion_ids):
        rating_counts[r.project_id] += 1

    rows = []
    for p in projects:
        scores = averages[p.id]
        total = 0
        for c in criteria:
            total += scores[c.id]
        rows.append({
            'project': p,
            'scores': scores,
            'total': total,
            'rating_count': rating_counts[p.id],
        })

    rows.sort(key=_tie_break_key)
    for position, row in enumerate(rows, start=1):
        row['position'] = position
    return rows


def build_project_reports(projects, criteria, ratings, comments):
    """
    Данные для печатных отчетов.

    average здесь = сумма всех оценок проекта / количество строк оценок.
    Это НЕ то же самое, что total в рейтинге (сумма средних по критериям),
    значения считаются независимо.
    """
    averages = criterion_averages(projects, criteria, ratings)
    project_ids = {p.id for p in projects}
    criterion_ids = {c.id for c in criteria}

    ratings_by_project = defaultdict(list)
    for r, score in _valid_ratings(ratings, project_ids, criterion_ids):
        ratings_by_project[r.project_id].append((r, score))

    comments_by_project = defaultdict(list)
    for c in comments:
        if c.project_id in project_ids:
            comments_by_project[c.project_id].append(c)

    reports = []
    for p in sorted(projects, key=lambda item: ((item.name or '').lower(), str(item.id))):
        project_ratings = ratings_by_project[p.id]
        count = len(project_ratings)
        reports.append({
            'project': p,
            'criteria': list(criteria),
            'criteria_averages': averages[p.id],
            'ratings': [r for r, _score in project_ratings],
            'comments': comments_by_project[p.id],
            'rating_count': count,
            'average': sum(score for _r, score in project_ratings) / count if count else 0,
        })
    return reports


def judge_progress(judge_id, project_id, criteria, ratings, comments):
    criterion_ids = {c.id for c in criteria}
    rated = {
        r.criterion_id for r in ratings
        if r.judge_id == judge_id and r.project_id == project_id and r.criterion_id in criterion_ids
    }
    has_comment = any(
        c.judge_id == judge_id and c.project_id == project_id and (c.text or '').strip()
        for c in comments
    )
    total = len(criterion_ids)
    return {
        'count': len(rated),
        'total': total,
        'has_comment': has_comment,
        'is_complete': total > 0 and len(rated) == total and has_comment,
    }


def judge_summary(judge_id, projects, criteria, ratings, comments):
    """Сколько проектов судья оценил полностью."""
    return sum(
        1 for p in projects
        if judge_progress(judge_id, p.id, criteria, ratings, comments)['is_complete']
    )


def format_score(value, places=1):
    # Отсутствующее среднее показывается прочерком, но в сумме считается как 0
    if not value:
        return '-'
    return f'{value:.{places}f}'
