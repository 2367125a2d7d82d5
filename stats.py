"""Dashboard statistics computed from task and user snapshots.

Everything here is a pure function of its inputs: the store owns the
records, the dashboard only derives counts and percentages on every render.
"""
from config import ADMIN_ROLE, DEFAULT_ROLE, UNNAMED_USER_LABEL

PENDING = 'pending'
IN_PROGRESS = 'in-progress'
COMPLETED = 'completed'


def completion_percentage(completed, total):
    """Integer percentage of completed over total, rounded half up. 0 when total is 0."""
    if not total or total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


def _status(task):
    return task.get('status') if task else None


def count_by_status(tasks):
    """Tally tasks by their status. Unknown statuses only count towards the total."""
    tasks = tasks or []
    statuses = [_status(t) for t in tasks]
    return {
        'pending': statuses.count(PENDING),
        'in_progress': statuses.count(IN_PROGRESS),
        'completed': statuses.count(COMPLETED),
        'total': len(tasks),
    }


def _same_id(left, right):
    # The store hands out ids as ints or strings depending on the table
    if left is None or right is None:
        return False
    return str(left) == str(right)


def _display_name(name, unnamed_label):
    if name is None or not str(name).strip():
        return unnamed_label
    return str(name)


def user_stats(tasks, users, unnamed_label=UNNAMED_USER_LABEL, default_role=DEFAULT_ROLE):
    """Per-user completion metrics, most completed tasks first."""
    tasks = [t for t in (tasks or []) if t]
    results = []
    for user in users or []:
        user = user or {}
        assigned = [t for t in tasks if _same_id(t.get('assignedTo'), user.get('id'))]
        completed = sum(1 for t in assigned if t.get('status') == COMPLETED)
        results.append({
            'id': user.get('id'),
            'name': _display_name(user.get('name'), unnamed_label),
            'role': user.get('role') or default_role,
            'completed': completed,
            'total': len(assigned),
            'percentage': completion_percentage(completed, len(assigned)),
        })

    # sorted() is stable, ties keep the store's order
    return sorted(results, key=lambda s: s['completed'], reverse=True)


def dashboard_stats(tasks=None, users=None, current_user=None,
                    unnamed_label=UNNAMED_USER_LABEL, default_role=DEFAULT_ROLE):
    """Build the dashboard view-model."""
    stats = count_by_status(tasks)
    stats['completion_percentage'] = completion_percentage(stats['completed'], stats['total'])
    stats['is_admin'] = (current_user or {}).get('role') == ADMIN_ROLE
    stats['user_stats'] = user_stats(tasks, users, unnamed_label, default_role)
    stats['chart_max'] = max([s['completed'] for s in stats['user_stats']] or [0])
    return stats
