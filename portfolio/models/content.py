"""
Portfolio Content Models
"""

from portfolio.extensions import db
from portfolio.models.base import RecordMixin


class Profile(RecordMixin, db.Model):
    """Singleton profile shown in the hero and about sections"""
    __tablename__ = 'profiles'

    full_name = db.Column(db.String(200), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    bio = db.Column(db.Text, nullable=False, default='')
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    location = db.Column(db.String(200))
    avatar_url = db.Column(db.String(1024))
    resume_url = db.Column(db.String(1024))
    github_url = db.Column(db.String(1024))
    linkedin_url = db.Column(db.String(1024))
    twitter_url = db.Column(db.String(1024))
    website_url = db.Column(db.String(1024))

    def __repr__(self):
        return f'<Profile {self.full_name}>'


class Service(RecordMixin, db.Model):
    __tablename__ = 'services'

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    icon_name = db.Column(db.String(100), nullable=False, default='')
    order = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<Service {self.title}>'


class Skill(RecordMixin, db.Model):
    __tablename__ = 'skills'

    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(200), nullable=False, default='')
    proficiency = db.Column(db.Integer, nullable=False, default=0)  # 0-100
    order = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<Skill {self.name} {self.proficiency}%>'


class Project(RecordMixin, db.Model):
    __tablename__ = 'projects'

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    image_url = db.Column(db.String(1024))
    live_url = db.Column(db.String(1024))
    github_url = db.Column(db.String(1024))
    technologies = db.Column(db.JSON, nullable=False, default=list)
    categories = db.Column(db.JSON, nullable=False, default=list)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    order = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<Project {self.title}>'


class Experience(RecordMixin, db.Model):
    __tablename__ = 'experiences'

    title = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), nullable=False, default='')
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)  # always NULL while current
    current = db.Column(db.Boolean, nullable=False, default=False)
    description = db.Column(db.Text, nullable=False, default='')
    company_logo = db.Column(db.String(1024))
    order = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<Experience {self.title} at {self.company}>'


class Testimonial(RecordMixin, db.Model):
    __tablename__ = 'testimonials'

    name = db.Column(db.String(200), nullable=False)
    position = db.Column(db.String(200), nullable=False, default='')
    company = db.Column(db.String(200), nullable=False, default='')
    content = db.Column(db.Text, nullable=False)
    avatar_url = db.Column(db.String(1024))
    order = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<Testimonial {self.name}>'
