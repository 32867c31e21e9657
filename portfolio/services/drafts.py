"""
Draft Records

Explicit, tagged form state for each entity. A draft is built from a submitted
form or an existing row, checked with ``validation_errors()`` before any write,
and turned into column values with ``to_record()``.
"""

from dataclasses import dataclass
from datetime import date
from typing import Annotated, ClassVar, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator, model_validator


@dataclass(frozen=True)
class FormField:
    """How one draft field is rendered and read back from a submitted form."""
    name: str
    label: str
    kind: str = 'text'  # text, textarea, number, checkbox, date, url, email, tags, file
    required: bool = False
    column: Optional[str] = None  # for file inputs: the URL column they fill


def add_token(tokens, token):
    """Append a trimmed token unless it is blank or already present."""
    token = (token or '').strip()
    if not token or token in tokens:
        return list(tokens)
    return list(tokens) + [token]


def remove_token(tokens, token):
    """Remove exactly one occurrence of ``token``."""
    result = list(tokens)
    if token in result:
        result.remove(token)
    return result


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Draft(BaseModel):
    """Base draft: optional id (present when editing) plus form metadata."""

    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    id: Optional[str] = None

    form_fields: ClassVar[tuple] = ()
    list_columns: ClassVar[tuple] = ()
    required_fields: ClassVar[tuple] = ()

    @field_validator('id', mode='before')
    @classmethod
    def empty_id(cls, value):
        return _blank_to_none(value)

    @classmethod
    def tag_fields(cls):
        return tuple(f.name for f in cls.form_fields if f.kind == 'tags')

    @classmethod
    def raw_from_form(cls, form):
        """Collect the values this draft's fields submit (checkboxes absent means False)."""
        data = {'id': form.get('id')}
        for f in cls.form_fields:
            if f.kind == 'file':
                continue
            if f.kind == 'tags':
                data[f.name] = [t for t in form.getlist(f.name) if t.strip()]
            elif f.kind == 'checkbox':
                data[f.name] = f.name in form
            else:
                data[f.name] = form.get(f.name, '')
        # URL columns filled by uploads round-trip as hidden inputs
        for f in cls.form_fields:
            if f.kind == 'file' and f.column:
                data[f.column] = form.get(f.column, '')
        return data

    @classmethod
    def from_form(cls, form):
        return cls.model_validate(cls.raw_from_form(form))

    @classmethod
    def from_record(cls, record):
        data = dict(record)
        for name in cls.tag_fields():
            data[name] = data.get(name) or []
        return cls.model_validate(data)

    def validation_errors(self):
        errors = []
        labels = {f.name: f.label for f in self.form_fields}
        for name in self.required_fields:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value):
                errors.append(f'{labels.get(name, name)} is required.')
        return errors

    def to_record(self):
        """Column values for an insert/patch (no id, no tag)."""
        return self.model_dump(exclude={'id', 'kind'})


def _int_or_zero(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    return value


# Blank number inputs mean zero
Number = Annotated[int, BeforeValidator(_int_or_zero)]


class ProfileDraft(Draft):
    kind: Literal['profile'] = 'profile'
    full_name: str = ''
    title: str = ''
    bio: str = ''
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    website_url: Optional[str] = None
    avatar_url: Optional[str] = None
    resume_url: Optional[str] = None

    form_fields: ClassVar[tuple] = (
        FormField('full_name', 'Full Name', required=True),
        FormField('title', 'Title', required=True),
        FormField('bio', 'Bio', 'textarea', required=True),
        FormField('email', 'Email', 'email'),
        FormField('phone', 'Phone'),
        FormField('location', 'Location'),
        FormField('avatar', 'Avatar', 'file', column='avatar_url'),
        FormField('resume', 'Resume', 'file', column='resume_url'),
        FormField('github_url', 'GitHub URL', 'url'),
        FormField('linkedin_url', 'LinkedIn URL', 'url'),
        FormField('twitter_url', 'Twitter URL', 'url'),
        FormField('website_url', 'Website URL', 'url'),
    )
    required_fields: ClassVar[tuple] = ('full_name', 'title', 'bio')

    @field_validator('email', 'phone', 'location', 'github_url', 'linkedin_url',
                     'twitter_url', 'website_url', 'avatar_url', 'resume_url', mode='before')
    @classmethod
    def optional_text(cls, value):
        return _blank_to_none(value)


class ServiceDraft(Draft):
    kind: Literal['service'] = 'service'
    title: str = ''
    description: str = ''
    icon_name: str = ''
    order: Number = 0

    form_fields: ClassVar[tuple] = (
        FormField('title', 'Title', required=True),
        FormField('description', 'Description', 'textarea', required=True),
        FormField('icon_name', 'Icon Name', required=True),
        FormField('order', 'Display Order', 'number'),
    )
    list_columns: ClassVar[tuple] = (('order', 'Order'), ('title', 'Title'), ('icon_name', 'Icon'))
    required_fields: ClassVar[tuple] = ('title', 'description', 'icon_name')


class SkillDraft(Draft):
    kind: Literal['skill'] = 'skill'
    name: str = ''
    category: str = ''
    proficiency: Number = 0
    order: Number = 0

    form_fields: ClassVar[tuple] = (
        FormField('name', 'Name', required=True),
        FormField('category', 'Category', required=True),
        FormField('proficiency', 'Proficiency (0-100)', 'number'),
        FormField('order', 'Display Order', 'number'),
    )
    list_columns: ClassVar[tuple] = (('order', 'Order'), ('name', 'Name'), ('category', 'Category'),
                                     ('proficiency', 'Proficiency'))
    required_fields: ClassVar[tuple] = ('name', 'category')

    def validation_errors(self):
        errors = super().validation_errors()
        if not 0 <= self.proficiency <= 100:
            errors.append('Proficiency must be between 0 and 100.')
        return errors


class ProjectDraft(Draft):
    kind: Literal['project'] = 'project'
    title: str = ''
    description: str = ''
    image_url: Optional[str] = None
    live_url: Optional[str] = None
    github_url: Optional[str] = None
    technologies: List[str] = []
    categories: List[str] = []
    featured: bool = False
    order: Number = 0

    form_fields: ClassVar[tuple] = (
        FormField('title', 'Title', required=True),
        FormField('description', 'Description', 'textarea', required=True),
        FormField('image', 'Project Image', 'file', column='image_url'),
        FormField('live_url', 'Live URL', 'url'),
        FormField('github_url', 'Source URL', 'url'),
        FormField('technologies', 'Technologies', 'tags'),
        FormField('categories', 'Categories', 'tags'),
        FormField('featured', 'Featured', 'checkbox'),
        FormField('order', 'Display Order', 'number'),
    )
    list_columns: ClassVar[tuple] = (('order', 'Order'), ('title', 'Title'), ('featured', 'Featured'),
                                     ('technologies', 'Technologies'))
    required_fields: ClassVar[tuple] = ('title', 'description')

    @field_validator('image_url', 'live_url', 'github_url', mode='before')
    @classmethod
    def optional_text(cls, value):
        return _blank_to_none(value)

    @field_validator('technologies', 'categories', mode='before')
    @classmethod
    def no_duplicate_tokens(cls, value):
        tokens = []
        for token in value or []:
            tokens = add_token(tokens, token)
        return tokens


class ExperienceDraft(Draft):
    kind: Literal['experience'] = 'experience'
    title: str = ''
    company: str = ''
    location: str = ''
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    current: bool = False
    description: str = ''
    company_logo: Optional[str] = None
    order: Number = 0

    form_fields: ClassVar[tuple] = (
        FormField('title', 'Title', required=True),
        FormField('company', 'Company', required=True),
        FormField('location', 'Location'),
        FormField('start_date', 'Start Date', 'date', required=True),
        FormField('current', 'I currently work here', 'checkbox'),
        FormField('end_date', 'End Date', 'date'),
        FormField('description', 'Description', 'textarea', required=True),
        FormField('logo', 'Company Logo', 'file', column='company_logo'),
        FormField('order', 'Display Order', 'number'),
    )
    list_columns: ClassVar[tuple] = (('order', 'Order'), ('title', 'Title'), ('company', 'Company'),
                                     ('start_date', 'Start'), ('end_date', 'End'))
    required_fields: ClassVar[tuple] = ('title', 'company', 'start_date', 'description')

    @field_validator('start_date', 'end_date', 'company_logo', mode='before')
    @classmethod
    def optional_value(cls, value):
        return _blank_to_none(value)

    @model_validator(mode='after')
    def current_has_no_end_date(self):
        if self.current:
            self.end_date = None
        return self

    def validation_errors(self):
        errors = super().validation_errors()
        if self.start_date and self.end_date and self.end_date < self.start_date:
            errors.append('End Date cannot be before Start Date.')
        return errors


class TestimonialDraft(Draft):
    kind: Literal['testimonial'] = 'testimonial'
    name: str = ''
    position: str = ''
    company: str = ''
    content: str = ''
    avatar_url: Optional[str] = None
    order: Number = 0

    form_fields: ClassVar[tuple] = (
        FormField('name', 'Name', required=True),
        FormField('position', 'Position'),
        FormField('company', 'Company'),
        FormField('content', 'Testimonial', 'textarea', required=True),
        FormField('avatar', 'Avatar', 'file', column='avatar_url'),
        FormField('order', 'Display Order', 'number'),
    )
    list_columns: ClassVar[tuple] = (('order', 'Order'), ('name', 'Name'), ('company', 'Company'))
    required_fields: ClassVar[tuple] = ('name', 'content')

    @field_validator('avatar_url', mode='before')
    @classmethod
    def optional_text(cls, value):
        return _blank_to_none(value)


class SettingDraft(Draft):
    kind: Literal['setting'] = 'setting'
    key: str = ''
    value: str = ''
    description: Optional[str] = None

    form_fields: ClassVar[tuple] = (
        FormField('key', 'Key', required=True),
        FormField('value', 'Value', required=True),
        FormField('description', 'Description', 'textarea'),
    )
    required_fields: ClassVar[tuple] = ('key', 'value')

    @field_validator('description', mode='before')
    @classmethod
    def optional_text(cls, value):
        return _blank_to_none(value)


class ContactDraft(Draft):
    kind: Literal['message'] = 'message'
    name: str = ''
    email: str = ''
    subject: str = ''
    message: str = ''

    form_fields: ClassVar[tuple] = (
        FormField('name', 'Name', required=True),
        FormField('email', 'Email', 'email', required=True),
        FormField('subject', 'Subject', required=True),
        FormField('message', 'Message', 'textarea', required=True),
    )
    required_fields: ClassVar[tuple] = ('name', 'email', 'subject', 'message')

    def validation_errors(self):
        errors = super().validation_errors()
        if self.email and '@' not in self.email:
            errors.append('Please provide a valid email address.')
        return errors

    def to_record(self):
        record = super().to_record()
        record['read'] = False
        return record
