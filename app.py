import io
import logging
from functools import wraps
from flask import Flask, render_template, request, redirect, url_for, flash, jsonify, send_file, session, g, abort
from flask_login import LoginManager, login_user, logout_user, login_required, current_user

import navigation
from config import Config
from auth_gateway import AuthGateway, FormGuard
from reports import create_stats_pdf
from stats import dashboard_stats, user_stats, PENDING, IN_PROGRESS, COMPLETED
from supabase_api import SupabaseAPI
from user import Session, User

SESSION_KEY = 'auth_session'
TASK_STATUSES = (PENDING, IN_PROGRESS, COMPLETED)

app = Flask(__name__)
app.config.from_object(Config)

# Shared by every request so a form can't have two sign-ins in flight
form_guard = FormGuard()

# Flask-Login setup
login_manager = LoginManager()
login_manager.init_app(app)
login_manager.login_view = 'login'
login_manager.login_message = None


@login_manager.user_loader
def load_user(user_id):
    auth_session = Session.from_dict(session.get(SESSION_KEY))
    if auth_session and str(auth_session.id) == str(user_id):
        return User(auth_session)
    return None


@app.before_request
def setup_supabase_api():
    """Set up the SupabaseAPI and AuthGateway instances in the g variable."""
    if 'supabase_api' not in g:
        g.supabase_api = SupabaseAPI(
            app.config['SUPABASE_PROJECT_ID'],
            app.config['SUPABASE_ANON_KEY'],
            app.config['SUPABASE_FUNCTION'],
            timeout=app.config['SUPABASE_TIMEOUT']
        )
        g.auth_gateway = AuthGateway(g.supabase_api, guard=form_guard, settings=app.config)


@app.context_processor
def inject_sidebar():
    """Sidebar data for base.html."""
    if not current_user.is_authenticated:
        return {}
    return {
        'menu_items': navigation.visible_items(current_user.role),
        'role_label': navigation.role_label(current_user.role),
        'avatar_initial': navigation.avatar_initial(current_user.name),
        'active_view': request.endpoint,
        'endpoint_for': navigation.endpoint_for,
    }


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_admin:
            app.logger.info(f"User {current_user.id} denied access to {request.path}")
            abort(403)
        return view(*args, **kwargs)
    return wrapped


def start_session(auth_session):
    """Store the session for later requests and log the user in."""
    session[SESSION_KEY] = auth_session.to_dict()
    session.permanent = True
    login_user(User(auth_session), remember=True)


def fetch_list(result, what):
    """Flash store errors and fall back to an empty list."""
    if isinstance(result, dict) and 'error' in result:
        app.logger.error(f"Could not load {what}: {result['error']}")
        flash(f"No se pudieron cargar los {what}: {result['error']}", 'error')
        return []
    return result or []


def load_dashboard_data():
    tasks = fetch_list(g.supabase_api.get_tasks(current_user.access_token), 'tareas')
    users = []
    if current_user.is_admin:
        users = fetch_list(g.supabase_api.get_users(current_user.access_token), 'usuarios')
    return dashboard_stats(
        tasks,
        users,
        {'role': current_user.role},
        unnamed_label=app.config['UNNAMED_USER_LABEL'],
        default_role=app.config['DEFAULT_ROLE']
    )


# Routes
@app.route('/')
@login_required
def index():
    return redirect(url_for('dashboard'))


@app.route('/dashboard')
@login_required
def dashboard():
    stats = load_dashboard_data()
    return render_template('dashboard.html', stats=stats)


@app.route('/api/stats')
@login_required
def api_stats():
    return jsonify(load_dashboard_data())


@app.route('/dashboard/export')
@login_required
def export_stats_pdf():
    """Export the dashboard statistics to PDF."""
    pdf_bytes = create_stats_pdf(load_dashboard_data())
    return send_file(io.BytesIO(pdf_bytes),
                     mimetype='application/pdf',
                     as_attachment=True,
                     download_name='resumen_tareas.pdf')


@app.route('/login', methods=['GET', 'POST'])
def login():
    app.logger.info("Login route accessed")
    if current_user.is_authenticated:
        return redirect(url_for('dashboard'))

    if request.method == 'POST':
        email = (request.form.get('email') or '').strip()
        password = request.form.get('password') or ''

        result = g.auth_gateway.sign_in(email, password)
        if result.ok:
            start_session(result.session)
            app.logger.info(f"User {result.session.id} logged in")
            return redirect(url_for('dashboard'))
        if result.error:
            flash(result.error, 'error')

    return render_template('login.html')


@app.route('/logout')
@login_required
def logout():
    session.pop(SESSION_KEY, None)
    logout_user()
    flash('Sesión cerrada', 'success')
    return redirect(url_for('login'))


@app.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('dashboard'))

    if request.method == 'POST':
        name = (request.form.get('name') or '').strip()
        email = (request.form.get('email') or '').strip()
        password = request.form.get('password') or ''

        result = g.auth_gateway.register(name, email, password)
        if result.ok:
            start_session(result.session)
            app.logger.info(f"User {result.session.id} registered and logged in")
            return redirect(url_for('dashboard'))
        if result.registered:
            flash(result.error, 'success')
            return redirect(url_for('login'))
        if result.error:
            flash(result.error, 'error')

    return render_template('register.html', min_password_length=app.config['MIN_PASSWORD_LENGTH'])


@app.route('/view/<string:view_id>')
@login_required
def change_view(view_id):
    """Sidebar navigation: resolve a destination id to its page."""
    endpoint = navigation.endpoint_for(view_id)
    if endpoint is None or not navigation.is_available(current_user.role, view_id):
        flash('Sección no disponible', 'error')
        return redirect(url_for('dashboard'))
    return redirect(url_for(endpoint))


@app.route('/tasks')
@login_required
def tasks_view():
    tasks = fetch_list(g.supabase_api.get_tasks(current_user.access_token), 'tareas')

    # Get filter and sort parameters from query string
    status_filter = request.args.get('status', '')
    sort_order = request.args.get('sort_order', 'DESC').upper()
    if sort_order not in ('ASC', 'DESC'):
        sort_order = 'DESC'

    if status_filter in TASK_STATUSES:
        tasks = [t for t in tasks if t and t.get('status') == status_filter]
    else:
        status_filter = ''

    tasks = sorted((t for t in tasks if t), key=lambda t: str(t.get('createdAt') or ''),
                   reverse=sort_order == 'DESC')

    return render_template('tasks.html',
                           tasks=tasks,
                           statuses=TASK_STATUSES,
                           current_filters={'status': status_filter, 'sort_order': sort_order})


@app.route('/users')
@login_required
@admin_required
def users_view():
    tasks = fetch_list(g.supabase_api.get_tasks(current_user.access_token), 'tareas')
    users = fetch_list(g.supabase_api.get_users(current_user.access_token), 'usuarios')
    stats = user_stats(tasks, users, app.config['UNNAMED_USER_LABEL'], app.config['DEFAULT_ROLE'])
    return render_template('users.html', user_stats=stats)


@app.route('/tasks/new', methods=['GET', 'POST'])
@login_required
@admin_required
def create_task():
    users = fetch_list(g.supabase_api.get_users(current_user.access_token), 'usuarios')

    if request.method == 'POST':
        title = (request.form.get('title') or '').strip()
        if not title:
            flash('El título es obligatorio', 'error')
            return render_template('create_task.html', users=users, statuses=TASK_STATUSES)

        status = request.form.get('status') or PENDING
        if status not in TASK_STATUSES:
            status = PENDING

        task = {
            'title': title,
            'description': request.form.get('description', ''),
            'status': status,
            'assignedTo': request.form.get('assignedTo') or None,
        }
        result = g.supabase_api.create_task(current_user.access_token, task)
        if 'error' in result:
            flash(f"Error al crear la tarea: {result['error']}", 'error')
            return render_template('create_task.html', users=users, statuses=TASK_STATUSES)

        flash('Tarea creada', 'success')
        return redirect(url_for('tasks_view'))

    return render_template('create_task.html', users=users, statuses=TASK_STATUSES)


@app.route('/profile')
@login_required
def profile():
    return render_template('profile.html')


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    if not app.secret_key:
        raise SystemExit('SECRET_KEY must be set to sign session cookies')
    app.run(debug=False)
