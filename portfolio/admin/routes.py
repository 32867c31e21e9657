"""
Admin Routes

Login/logout, dashboard, profile, messages and site settings. The list + form
content screens live in ``screens.py``.
"""

import logging

from flask import render_template, request, redirect, url_for, flash
from pydantic import ValidationError

from portfolio.admin import admin_bp
from portfolio.admin.crud import flash_validation_error
from portfolio.admin.decorators import admin_required
from portfolio.admin.uploads import discard_uploads, upload_record_files
from portfolio.extensions import session_manager
from portfolio.services import inbox, repository
from portfolio.services.auth import AuthError
from portfolio.services.drafts import ProfileDraft, SettingDraft
from portfolio.services.repository import DataAccessError
from portfolio.services.storage import StorageError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password. Please try again.'

# Dashboard cards; trend figures are static placeholders
DASHBOARD_TRENDS = {
    'total_visits': ('+14%', 'up'),
    'unique_visitors': ('+5.3%', 'up'),
    'messages': ('+28%', 'up'),
}


def login_error_message(error):
    """Friendlier text for the provider's invalid credentials error."""
    message = getattr(error, 'message', None) or str(error) or 'Failed to login'
    if 'Invalid login' in message:
        return INVALID_CREDENTIALS_MESSAGE
    return message


# -----------------------------------------------------------------------------
# Authentication
# -----------------------------------------------------------------------------

@admin_bp.route('', methods=['GET', 'POST'])
def admin_login():
    """Admin login page backed by the hosted auth provider."""
    if request.method == 'GET' and session_manager.state.logged_in:
        return redirect(url_for('admin.dashboard'))

    error = None
    email = ''
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')

        if not email or not password:
            error = 'Please enter both email and password.'
        else:
            try:
                session_manager.sign_in(email, password)
                return redirect(url_for('admin.dashboard'))
            except AuthError as e:
                logger.info('Admin login failed for %s: %s', email, e)
                error = login_error_message(e)

    return render_template('admin/login.html', error=error, email=email)


@admin_bp.route('/logout', methods=['GET', 'POST'])
def admin_logout():
    session_manager.sign_out()
    flash('You have been logged out of the admin panel.', 'info')
    return redirect(url_for('admin.admin_login'))


@admin_bp.route('/')
@admin_required
def admin_index():
    return redirect(url_for('admin.dashboard'))


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

@admin_bp.route('/dashboard')
@admin_required
def dashboard():
    """Recent messages and visit counts."""
    try:
        summary = inbox.dashboard_summary()
        load_error = None
    except DataAccessError as e:
        flash(f'Failed to load dashboard data: {e.detail}', 'danger')
        summary = {'recent_messages': [], 'total_visits': 0, 'unique_visitors': 0}
        load_error = e.detail

    return render_template('admin/dashboard.html',
                           recent_messages=summary['recent_messages'],
                           total_visits=summary['total_visits'],
                           unique_visitors=summary['unique_visitors'],
                           trends=DASHBOARD_TRENDS,
                           load_error=load_error,
                           admin_email=session_manager.state.email)


# -----------------------------------------------------------------------------
# Profile (singleton)
# -----------------------------------------------------------------------------

@admin_bp.route('/profile', methods=['GET', 'POST'])
@admin_required
def profile():
    if request.method == 'GET':
        try:
            record = repository.profiles.first()
        except DataAccessError as e:
            flash(f'Failed to load profile: {e.detail}', 'danger')
            record = None
        draft = ProfileDraft.from_record(record) if record else ProfileDraft()
        return render_template('admin/profile.html', draft=draft)

    raw = ProfileDraft.raw_from_form(request.form)
    try:
        draft = ProfileDraft.model_validate(raw)
    except ValidationError as e:
        flash_validation_error(ProfileDraft, e)
        return render_template('admin/profile.html', draft=ProfileDraft.model_construct(**raw))

    errors = draft.validation_errors()
    if errors:
        for message in errors:
            flash(message, 'danger')
        return render_template('admin/profile.html', draft=draft)

    values = draft.to_record()
    try:
        uploaded = upload_record_files(repository.profiles.schema, request.files)
    except StorageError as e:
        flash(f'Upload Failed: {e.message}', 'danger')
        return render_template('admin/profile.html', draft=draft)
    values.update(uploaded)

    try:
        if draft.id:
            repository.profiles.update(draft.id, values)
        else:
            repository.profiles.add(values)
    except DataAccessError as e:
        discard_uploads(repository.profiles.schema, uploaded)
        flash(f'Update Failed: {e.detail}', 'danger')
        return render_template('admin/profile.html', draft=draft)

    flash('Profile Updated', 'success')
    return redirect(url_for('admin.profile'))


# -----------------------------------------------------------------------------
# Messages
# -----------------------------------------------------------------------------

@admin_bp.route('/messages')
@admin_required
def messages():
    """Messages newest first, filtered by the ``q`` search text."""
    query = request.args.get('q', '')
    try:
        all_messages = repository.messages.list_cached()
    except DataAccessError as e:
        flash(f'Failed to load messages: {e.detail}', 'danger')
        all_messages = []

    return render_template('admin/messages.html',
                           messages=inbox.filter_messages(all_messages, query),
                           unread_count=inbox.count_unread(all_messages),
                           query=query)


@admin_bp.route('/messages/<message_id>')
@admin_required
def message_detail(message_id):
    """Open a message; unread messages are marked read once."""
    try:
        message = inbox.open_message(message_id)
    except DataAccessError as e:
        flash(f'Failed to Mark Message as Read: {e.detail}', 'danger')
        return redirect(url_for('admin.messages'))

    if message is None:
        flash('Message not found.', 'warning')
        return redirect(url_for('admin.messages'))
    return render_template('admin/message_detail.html', message=message)


@admin_bp.route('/messages/<message_id>/delete', methods=['GET', 'POST'])
@admin_required
def message_delete(message_id):
    try:
        message = repository.messages.get(message_id)
    except DataAccessError as e:
        flash(f'Failed to load message: {e.detail}', 'danger')
        return redirect(url_for('admin.messages'))
    if message is None:
        flash('Message not found.', 'warning')
        return redirect(url_for('admin.messages'))

    if request.method == 'GET':
        cancel_url = url_for('admin.message_detail', message_id=message_id) \
            if request.args.get('from') == 'detail' else url_for('admin.messages')
        return render_template('admin/confirm_delete.html', label='Message', record=message,
                               summary=message['subject'],
                               action_url=url_for('admin.message_delete', message_id=message_id),
                               cancel_url=cancel_url)

    if request.form.get('confirm') != 'yes':
        flash('Delete cancelled.', 'info')
        return redirect(url_for('admin.messages'))

    try:
        repository.messages.delete(message_id)
        flash('Message Deleted', 'success')
    except DataAccessError as e:
        flash(f'Failed to Delete Message: {e.detail}', 'danger')
    return redirect(url_for('admin.messages'))


# -----------------------------------------------------------------------------
# Site settings
# -----------------------------------------------------------------------------

def _render_settings(draft=None):
    try:
        settings = repository.site_settings.list_cached()
    except DataAccessError as e:
        flash(f'Failed to load settings: {e.detail}', 'danger')
        settings = []
    return render_template('admin/settings.html', settings=settings, draft=draft or SettingDraft())


@admin_bp.route('/settings', methods=['GET', 'POST'])
@admin_required
def settings():
    """List settings and add new key/value pairs."""
    if request.method == 'GET':
        return _render_settings()

    draft = SettingDraft.from_form(request.form)
    errors = draft.validation_errors()
    if errors:
        for message in errors:
            flash(message, 'danger')
        return _render_settings(draft)

    try:
        if repository.site_settings.find_by(key=draft.key):
            flash(f'A setting with key "{draft.key}" already exists.', 'danger')
            return _render_settings(draft)
        repository.site_settings.add(draft.to_record())
    except DataAccessError as e:
        flash(f'Failed to Create Setting: {e.detail}', 'danger')
        return _render_settings(draft)

    flash('Setting Created', 'success')
    return redirect(url_for('admin.settings'))


@admin_bp.route('/settings/<setting_id>', methods=['POST'])
@admin_required
def setting_update(setting_id):
    """Update value/description; the key never changes."""
    value = request.form.get('value', '').strip()
    description = request.form.get('description', '').strip() or None
    if not value:
        flash('Value is required.', 'danger')
        return redirect(url_for('admin.settings'))

    try:
        repository.site_settings.update(setting_id, {'value': value, 'description': description})
        flash('Setting Updated', 'success')
    except DataAccessError as e:
        flash(f'Update Failed: {e.detail}', 'danger')
    return redirect(url_for('admin.settings'))


@admin_bp.route('/settings/<setting_id>/delete', methods=['GET', 'POST'])
@admin_required
def setting_delete(setting_id):
    try:
        setting = repository.site_settings.get(setting_id)
    except DataAccessError as e:
        flash(f'Failed to load setting: {e.detail}', 'danger')
        return redirect(url_for('admin.settings'))
    if setting is None:
        flash('Setting not found.', 'warning')
        return redirect(url_for('admin.settings'))

    if request.method == 'GET':
        return render_template('admin/confirm_delete.html', label='Setting', record=setting,
                               summary=setting['key'],
                               action_url=url_for('admin.setting_delete', setting_id=setting_id),
                               cancel_url=url_for('admin.settings'))

    if request.form.get('confirm') != 'yes':
        flash('Delete cancelled.', 'info')
        return redirect(url_for('admin.settings'))

    try:
        repository.site_settings.delete(setting_id)
        flash('Setting Deleted', 'success')
    except DataAccessError as e:
        flash(f'Delete Failed: {e.detail}', 'danger')
    return redirect(url_for('admin.settings'))
