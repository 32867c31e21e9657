"""
Public Site Routes
"""

import logging

from flask import render_template, request, redirect, url_for, flash, jsonify

from portfolio.services import repository
from portfolio.services.drafts import ContactDraft
from portfolio.services.repository import DataAccessError
from portfolio.site import site_bp
from portfolio.site.services import load_sections

logger = logging.getLogger(__name__)


@site_bp.route('/')
def index():
    """Portfolio page; ``?category=`` filters the projects section"""
    sections = load_sections(request.args.get('category', '').strip())
    return render_template('site/index.html', contact=ContactDraft(), **sections)


@site_bp.route('/contact', methods=['POST'])
def contact():
    """Store a contact form submission as an unread message"""
    category = request.args.get('category', '').strip()
    draft = ContactDraft.from_form(request.form)
    errors = draft.validation_errors()
    if errors:
        for message in errors:
            flash(message, 'danger')
        return render_template('site/index.html', contact=draft, **load_sections(category)), 400

    try:
        repository.messages.add(draft.to_record())
    except DataAccessError as e:
        flash(f'Failed to send message: {e.detail}', 'danger')
        return render_template('site/index.html', contact=draft, **load_sections(category)), 500

    flash('Message sent! Thank you for reaching out. I will get back to you soon.', 'success')
    return redirect(url_for('site.index') + '#contact')


@site_bp.route('/api/visits', methods=['POST'])
def log_visit():
    """Page-view beacon: ``{"page": ..., "referrer": ...}``"""
    payload = request.get_json(silent=True) or {}
    page = (payload.get('page') or '').strip()
    if not page:
        return jsonify({'ok': False, 'error': 'page is required'}), 400

    try:
        repository.log_site_visit(page, payload.get('referrer') or None,
                                  request.headers.get('User-Agent'))
    except DataAccessError as e:
        logger.error('Failed to log site visit: %s', e.detail)
        return jsonify({'ok': False, 'error': 'could not record visit'}), 500
    return jsonify({'ok': True}), 201
