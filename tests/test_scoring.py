"""Тесты подсчета рейтинга, отчетов и прогресса судьи."""

import pytest

from scoring import (
    ProjectItem, CriterionItem, RatingItem, CommentItem,
    compute_ranking, criterion_averages, build_project_reports,
    judge_progress, judge_summary, format_score,
)


def rating(project_id, judge_id, criterion_id, score):
    return RatingItem(project_id, judge_id, criterion_id, score)


@pytest.fixture
def criteria():
    return [CriterionItem('c1', 'Метод'), CriterionItem('c2', 'Дизайн')]


@pytest.fixture
def projects():
    return [ProjectItem('p1', 'Альфа'), ProjectItem('p2', 'Бета'), ProjectItem('p3', 'Гамма')]


class TestComputeRanking:

    def test_single_criterion_scenario(self):
        criteria = [CriterionItem('c1', 'Method')]
        projects = [ProjectItem('p1', 'P1'), ProjectItem('p2', 'P2')]
        ratings = [
            rating('p1', 'judgeA', 'c1', 8),
            rating('p1', 'judgeB', 'c1', 6),
            rating('p2', 'judgeA', 'c1', 9),
        ]

        rows = compute_ranking(projects, criteria, ratings)

        assert [row['project'].id for row in rows] == ['p2', 'p1']
        assert rows[0]['scores']['c1'] == 9
        assert rows[1]['scores']['c1'] == 7
        assert rows[0]['total'] == 9
        assert rows[1]['total'] == 7
        assert [row['position'] for row in rows] == [1, 2]

    def test_project_without_ratings_is_last_with_zero(self, projects, criteria):
        ratings = [rating('p1', 'j', 'c1', 5), rating('p2', 'j', 'c2', 3)]

        rows = compute_ranking(projects, criteria, ratings)

        last = rows[-1]
        assert last['project'].id == 'p3'
        assert last['total'] == 0
        assert last['scores'] == {'c1': 0, 'c2': 0}
        assert last['rating_count'] == 0

    def test_mean_over_rows_not_average_of_judge_averages(self, criteria):
        projects = [ProjectItem('p1', 'Альфа')]
        ratings = [
            rating('p1', 'j1', 'c1', 10),
            rating('p1', 'j2', 'c1', 4),
            rating('p1', 'j3', 'c1', 4),
        ]

        rows = compute_ranking(projects, criteria, ratings)

        assert rows[0]['scores']['c1'] == pytest.approx(6)

    def test_total_is_sum_of_criterion_averages(self, projects, criteria):
        ratings = [
            rating('p1', 'j1', 'c1', 7.5), rating('p1', 'j2', 'c1', 9),
            rating('p1', 'j1', 'c2', 3), rating('p2', 'j1', 'c2', 10),
            rating('p3', 'j2', 'c1', 1.5),
        ]

        for row in compute_ranking(projects, criteria, ratings):
            assert row['total'] == pytest.approx(sum(row['scores'][c.id] for c in criteria))

    def test_every_project_once_and_sorted(self, projects, criteria):
        ratings = [
            rating('p3', 'j1', 'c1', 10), rating('p1', 'j1', 'c1', 2),
            rating('p2', 'j1', 'c2', 6), rating('p2', 'j2', 'c2', 7),
        ]

        rows = compute_ranking(projects, criteria, ratings)

        assert sorted(row['project'].id for row in rows) == ['p1', 'p2', 'p3']
        totals = [row['total'] for row in rows]
        assert all(a >= b for a, b in zip(totals, totals[1:]))

    def test_ties_broken_by_name(self, criteria):
        projects = [ProjectItem(2, 'бета'), ProjectItem(1, 'Альфа'), ProjectItem(3, 'Вега')]
        ratings = [rating(2, 'j', 'c1', 5), rating(1, 'j', 'c1', 5), rating(3, 'j', 'c1', 5)]

        rows = compute_ranking(projects, criteria, ratings)

        assert [row['project'].name for row in rows] == ['Альфа', 'бета', 'Вега']

    def test_recompute_gives_same_result(self, projects, criteria):
        ratings = [rating('p1', 'j', 'c1', 4), rating('p2', 'j', 'c1', 4), rating('p3', 'j', 'c2', 8)]

        first = compute_ranking(projects, criteria, ratings)
        second = compute_ranking(projects, criteria, ratings)

        assert first == second

    def test_empty_inputs(self, projects, criteria):
        assert compute_ranking([], criteria, []) == []
        assert compute_ranking(projects, [], [rating('p1', 'j', 'c1', 5)]) == []

    def test_unknown_references_are_ignored(self, projects, criteria):
        ratings = [
            rating('p1', 'j', 'c1', 6),
            rating('ghost', 'j', 'c1', 10),
            rating('p1', 'j', 'deleted', 10),
            rating('p1', 'j', 'c1', 'abc'),
        ]

        rows = compute_ranking(projects, criteria, ratings)

        p1 = next(row for row in rows if row['project'].id == 'p1')
        assert p1['scores'] == {'c1': 6, 'c2': 0}
        assert p1['total'] == 6
        assert p1['rating_count'] == 1
        assert len(rows) == 3

    def test_scores_follow_criteria(self, projects, criteria):
        averages = criterion_averages(projects, criteria, [])
        assert list(averages['p1']) == ['c1', 'c2']


class TestProjectReports:

    def test_report_average_differs_from_ranking_total(self, criteria):
        projects = [ProjectItem('p1', 'Альфа')]
        ratings = [rating('p1', 'j', 'c1', 10), rating('p1', 'j', 'c2', 2)]

        ranking = compute_ranking(projects, criteria, ratings)
        report = build_project_reports(projects, criteria, ratings, [])[0]

        assert ranking[0]['total'] == 12
        assert report['average'] == 6
        assert report['criteria_averages'] == {'c1': 10, 'c2': 2}

    def test_average_divides_by_rating_rows(self, criteria):
        projects = [ProjectItem('p1', 'Альфа')]
        ratings = [
            rating('p1', 'j1', 'c1', 9), rating('p1', 'j2', 'c1', 7),
            rating('p1', 'j1', 'c2', 2),
        ]

        report = build_project_reports(projects, criteria, ratings, [])[0]

        assert report['rating_count'] == 3
        assert report['average'] == pytest.approx(6)

    def test_report_collects_comments_and_orders_by_name(self, projects, criteria):
        comments = [
            CommentItem('p2', 'j1', 'Хорошо'),
            CommentItem('p2', 'j2', 'Отлично'),
            CommentItem('ghost', 'j1', 'Потерян'),
        ]

        reports = build_project_reports(list(reversed(projects)), criteria, [], comments)

        assert [r['project'].id for r in reports] == ['p1', 'p2', 'p3']
        assert [c.text for c in reports[1]['comments']] == ['Хорошо', 'Отлично']
        assert reports[0]['average'] == 0
        assert reports[0]['comments'] == []


class TestJudgeProgress:

    def test_complete_requires_all_criteria_and_comment(self, criteria):
        ratings = [rating('p1', 'j1', 'c1', 5), rating('p1', 'j1', 'c2', 6)]
        comments = [CommentItem('p1', 'j1', 'Отличная работа')]

        progress = judge_progress('j1', 'p1', criteria, ratings, comments)

        assert progress == {'count': 2, 'total': 2, 'has_comment': True, 'is_complete': True}

    def test_missing_comment_is_not_complete(self, criteria):
        ratings = [rating('p1', 'j1', 'c1', 5), rating('p1', 'j1', 'c2', 6)]
        comments = [CommentItem('p1', 'j1', '   ')]

        progress = judge_progress('j1', 'p1', criteria, ratings, comments)

        assert progress['has_comment'] is False
        assert progress['is_complete'] is False

    def test_other_judges_ratings_do_not_count(self, criteria):
        ratings = [rating('p1', 'j1', 'c1', 5), rating('p1', 'j2', 'c2', 6)]
        comments = [CommentItem('p1', 'j1', 'ok')]

        progress = judge_progress('j1', 'p1', criteria, ratings, comments)

        assert progress['count'] == 1
        assert progress['is_complete'] is False

    def test_no_criteria_is_never_complete(self):
        progress = judge_progress('j1', 'p1', [], [], [CommentItem('p1', 'j1', 'ok')])
        assert progress['is_complete'] is False

    def test_judge_summary_counts_complete_projects(self, projects, criteria):
        ratings = [
            rating('p1', 'j1', 'c1', 5), rating('p1', 'j1', 'c2', 6),
            rating('p2', 'j1', 'c1', 5),
        ]
        comments = [CommentItem('p1', 'j1', 'ok'), CommentItem('p2', 'j1', 'ok')]

        assert judge_summary('j1', projects, criteria, ratings, comments) == 1


@pytest.mark.parametrize('value, places, expected', [
    (0, 1, '-'),
    (None, 1, '-'),
    (7, 1, '7.0'),
    (6.25, 2, '6.25'),
])
def test_format_score(value, places, expected):
    assert format_score(value, places) == expected
