from config import ADMIN_ROLE

# view id -> Flask endpoint
ENDPOINTS = {
    'dashboard': 'dashboard',
    'tasks': 'tasks_view',
    'users': 'users_view',
    'create-task': 'create_task',
    'profile': 'profile',
}


def menu_items(role):
    """Sidebar destinations for a role, in display order."""
    is_admin = role == ADMIN_ROLE
    return [
        {'id': 'dashboard', 'label': 'Dashboard', 'available': True},
        {'id': 'tasks', 'label': 'Gestionar Tareas' if is_admin else 'Mis Tareas', 'available': True},
        {'id': 'users', 'label': 'Usuarios', 'available': is_admin},
        {'id': 'create-task', 'label': 'Nueva Tarea', 'available': is_admin},
    ]


def visible_items(role):
    return [item for item in menu_items(role) if item['available']]


def is_available(role, view_id):
    if view_id == 'profile':
        return True
    return any(item['id'] == view_id for item in visible_items(role))


def endpoint_for(view_id):
    return ENDPOINTS.get(view_id)


def role_label(role):
    return 'Administrador' if role == ADMIN_ROLE else 'Usuario'


def avatar_initial(name):
    name = (name or '').strip()
    return name[0].upper() if name else 'U'
