from stats import completion_percentage, count_by_status, user_stats, dashboard_stats


def make_task(task_id, status, assigned_to=None):
    return {'id': task_id, 'title': f'Task {task_id}', 'status': status,
            'assignedTo': assigned_to, 'createdAt': '2024-01-01T00:00:00Z'}


class TestCompletionPercentage:
    def test_zero_total_is_zero(self):
        assert completion_percentage(0, 0) == 0
        assert completion_percentage(5, 0) == 0

    def test_rounds_to_integer(self):
        assert completion_percentage(2, 3) == 67
        assert completion_percentage(1, 3) == 33

    def test_half_rounds_up(self):
        assert completion_percentage(1, 8) == 13
        assert completion_percentage(1, 200) == 1

    def test_bounds(self):
        for total in range(1, 12):
            for completed in range(total + 1):
                value = completion_percentage(completed, total)
                assert isinstance(value, int)
                assert 0 <= value <= 100


class TestCountByStatus:
    def test_known_statuses(self):
        tasks = [make_task(1, 'pending'), make_task(2, 'in-progress'),
                 make_task(3, 'completed'), make_task(4, 'completed')]
        assert count_by_status(tasks) == {'pending': 1, 'in_progress': 1, 'completed': 2, 'total': 4}

    def test_unknown_status_only_counts_in_total(self):
        tasks = [make_task(1, 'pending'), make_task(2, 'archived'), None]
        counts = count_by_status(tasks)
        assert counts['pending'] + counts['in_progress'] + counts['completed'] == 1
        assert counts['total'] == 3

    def test_none_input(self):
        assert count_by_status(None) == {'pending': 0, 'in_progress': 0, 'completed': 0, 'total': 0}


class TestUserStats:
    def test_matches_ids_as_strings(self):
        tasks = [make_task(1, 'completed', assigned_to=7), make_task(2, 'pending', assigned_to='7')]
        stats = user_stats(tasks, [{'id': '7', 'name': 'Luis', 'role': 'user'}])
        assert stats[0]['completed'] == 1
        assert stats[0]['total'] == 2
        assert stats[0]['percentage'] == 50

    def test_unassigned_tasks_never_match(self):
        tasks = [make_task(1, 'completed')]
        stats = user_stats(tasks, [{'id': None, 'name': 'Ghost'}])
        assert stats[0]['total'] == 0

    def test_blank_name_and_missing_role_get_placeholders(self):
        stats = user_stats([], [{'id': 'a', 'name': ''}, {'id': 'b', 'name': '   '}, {'id': 'c'}],
                           unnamed_label='Sin nombre', default_role='user')
        assert [s['name'] for s in stats] == ['Sin nombre'] * 3
        assert all(s['role'] == 'user' for s in stats)

    def test_sorted_by_completed_and_stable_on_ties(self):
        users = [{'id': 'a', 'name': 'A'}, {'id': 'b', 'name': 'B'},
                 {'id': 'c', 'name': 'C'}, {'id': 'd', 'name': 'D'}]
        tasks = [make_task(1, 'completed', 'c'), make_task(2, 'completed', 'c'),
                 make_task(3, 'completed', 'b'), make_task(4, 'completed', 'd')]
        stats = user_stats(tasks, users)
        assert [s['name'] for s in stats] == ['C', 'B', 'D', 'A']
        completed = [s['completed'] for s in stats]
        assert completed == sorted(completed, reverse=True)

    def test_one_entry_per_user(self):
        users = [{'id': str(i), 'name': f'U{i}'} for i in range(5)]
        assert len(user_stats([make_task(1, 'completed', '3')], users)) == 5


class TestDashboardStats:
    def test_empty_inputs(self):
        stats = dashboard_stats()
        assert stats['pending'] == stats['in_progress'] == stats['completed'] == stats['total'] == 0
        assert stats['completion_percentage'] == 0
        assert stats['user_stats'] == []
        assert stats['chart_max'] == 0
        assert stats['is_admin'] is False

    def test_three_tasks_two_users(self):
        tasks = [make_task(1, 'pending'), make_task(2, 'completed', 'A'), make_task(3, 'completed', 'A')]
        users = [{'id': 'B', 'name': 'Bea', 'role': 'user'}, {'id': 'A', 'name': 'Ana', 'role': 'admin'}]

        stats = dashboard_stats(tasks, users, {'role': 'admin'})

        assert stats['completed'] == 2
        assert stats['total'] == 3
        assert stats['completion_percentage'] == 67
        assert stats['is_admin'] is True
        assert stats['chart_max'] == 2
        assert [(s['name'], s['completed'], s['total'], s['percentage']) for s in stats['user_stats']] == [
            ('Ana', 2, 2, 100),
            ('Bea', 0, 0, 0),
        ]

    def test_does_not_mutate_inputs(self):
        tasks = [make_task(1, 'completed', 'A')]
        users = [{'id': 'A', 'name': ''}]
        dashboard_stats(tasks, users)
        assert users == [{'id': 'A', 'name': ''}]
        assert tasks == [make_task(1, 'completed', 'A')]
