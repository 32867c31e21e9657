"""
Generic CRUD Screen

One screen class drives every list + form management page. Each instance is
bound to a repository and a draft type and registers its own routes on the
admin blueprint.
"""

import logging

from flask import flash, redirect, render_template, request, url_for
from pydantic import ValidationError

from portfolio.admin.decorators import admin_required
from portfolio.admin.uploads import discard_uploads, remove_record_files, upload_record_files
from portfolio.services.drafts import add_token, remove_token
from portfolio.services.repository import DataAccessError
from portfolio.services.storage import StorageError

logger = logging.getLogger(__name__)


def flash_validation_error(draft_cls, error):
    labels = {f.name: f.label for f in draft_cls.form_fields}
    for item in error.errors():
        field = item['loc'][0] if item['loc'] else ''
        flash(f"{labels.get(field, field)}: {item['msg']}", 'danger')


class CrudScreen:
    """List, create/edit form and confirmed delete for one entity."""

    template = 'admin/crud.html'

    def __init__(self, slug, title, repository, draft_cls, new_label=None):
        self.slug = slug
        self.title = title
        self.repository = repository
        self.draft_cls = draft_cls
        self.label = repository.schema.label
        self.new_label = new_label or f'New {self.label}'

    @property
    def endpoint(self):
        return f'admin.{self.slug}'

    def register(self, bp):
        bp.add_url_rule(f'/{self.slug}', endpoint=self.slug,
                        view_func=admin_required(self.index), methods=['GET', 'POST'])
        bp.add_url_rule(f'/{self.slug}/<record_id>/delete', endpoint=f'{self.slug}_delete',
                        view_func=admin_required(self.delete), methods=['GET', 'POST'])

    def load_rows(self):
        try:
            return self.repository.list_cached()
        except DataAccessError as e:
            flash(f'Failed to load {self.title.lower()}: {e.detail}', 'danger')
            return []

    def render(self, draft):
        return render_template(self.template, screen=self, rows=self.load_rows(),
                               draft=draft, editing=bool(draft.id))

    def index(self):
        if request.method == 'POST':
            return self.submit()

        draft = self.draft_cls()
        edit_id = request.args.get('edit')
        if edit_id:
            try:
                record = self.repository.get(edit_id)
            except DataAccessError as e:
                flash(f'Failed to load {self.label}: {e.detail}', 'danger')
                record = None
            if record is None:
                flash(f'{self.label} not found.', 'warning')
                return redirect(url_for(self.endpoint))
            draft = self.draft_cls.from_record(record)
        return self.render(draft)

    def apply_tag_action(self, draft):
        """Handle add/remove token buttons. Returns True if the form asked for one."""
        action = request.form.get('action', 'save')
        for name in draft.tag_fields():
            if action == f'add_{name}':
                setattr(draft, name, add_token(getattr(draft, name), request.form.get(f'{name}_input')))
                return True
            if f'remove_{name}' in request.form:
                setattr(draft, name, remove_token(getattr(draft, name), request.form.get(f'remove_{name}')))
                return True
        return False

    def submit(self):
        raw = self.draft_cls.raw_from_form(request.form)
        try:
            draft = self.draft_cls.model_validate(raw)
        except ValidationError as e:
            flash_validation_error(self.draft_cls, e)
            return self.render(self.draft_cls.model_construct(**raw))

        if self.apply_tag_action(draft):
            return self.render(draft)

        errors = draft.validation_errors()
        if errors:
            for message in errors:
                flash(message, 'danger')
            return self.render(draft)

        verb = 'Update' if draft.id else 'Create'
        values = draft.to_record()
        try:
            uploaded = upload_record_files(self.repository.schema, request.files)
        except StorageError as e:
            flash(f'Upload Failed: {e.message}', 'danger')
            return self.render(draft)
        values.update(uploaded)

        try:
            if draft.id:
                self.repository.update(draft.id, values)
            else:
                self.repository.add(values)
        except DataAccessError as e:
            discard_uploads(self.repository.schema, uploaded)
            flash(f'Failed to {verb} {self.label}: {e.detail}', 'danger')
            return self.render(draft)

        flash(f'{self.label} {verb}d', 'success')
        return redirect(url_for(self.endpoint))

    def delete(self, record_id):
        try:
            record = self.repository.get(record_id)
        except DataAccessError as e:
            flash(f'Failed to load {self.label}: {e.detail}', 'danger')
            return redirect(url_for(self.endpoint))
        if record is None:
            flash(f'{self.label} not found.', 'warning')
            return redirect(url_for(self.endpoint))

        if request.method == 'GET':
            return render_template('admin/confirm_delete.html', label=self.label,
                                   record=record, summary=record.get(self.summary_field(record)),
                                   action_url=url_for(f'{self.endpoint}_delete', record_id=record_id),
                                   cancel_url=url_for(self.endpoint))

        if request.form.get('confirm') != 'yes':
            flash('Delete cancelled.', 'info')
            return redirect(url_for(self.endpoint))

        try:
            self.repository.delete(record_id)
        except DataAccessError as e:
            flash(f'Failed to Delete {self.label}: {e.detail}', 'danger')
            return redirect(url_for(self.endpoint))

        remove_record_files(self.repository.schema, record)
        flash(f'{self.label} Deleted', 'success')
        return redirect(url_for(self.endpoint))

    @staticmethod
    def summary_field(record):
        for name in ('title', 'name', 'key', 'full_name', 'subject'):
            if name in record:
                return name
        return 'id'
