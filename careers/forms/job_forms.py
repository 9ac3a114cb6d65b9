"""
Job posting form used by the dashboard jobs manager.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, BooleanField
from wtforms.validators import DataRequired, Length

from careers.models import JOB_ENUMS

REQUIRED = 'This field is required'


def _choices(field):
    return [(value, value) for value in JOB_ENUMS[field]]


class JobForm(FlaskForm):
    """Create or edit a job."""

    title = StringField('Job title', validators=[DataRequired(message=REQUIRED), Length(max=200)],
                        render_kw={'placeholder': 'Senior Frontend Engineer'})
    department = SelectField('Department', validators=[DataRequired(message=REQUIRED)], validate_choice=False)
    location = StringField('Location', validators=[DataRequired(message=REQUIRED), Length(max=200)],
                           render_kw={'placeholder': 'Berlin, Germany'})
    work_policy = SelectField('Work policy', choices=_choices('work_policy'), default='Remote')
    employment_type = SelectField('Employment type', choices=_choices('employment_type'), default='Full Time')
    experience_level = SelectField('Experience level', choices=_choices('experience_level'), default='Mid-Level')
    job_type = SelectField('Job type', choices=_choices('job_type'), default='Permanent')
    salary_range = StringField('Salary range', validators=[DataRequired(message=REQUIRED), Length(max=100)],
                               render_kw={'placeholder': '$100k - $130k'})
    description = TextAreaField('Description', validators=[DataRequired(message=REQUIRED)],
                                render_kw={'rows': 8})
    is_open = BooleanField('Open for applications', default=True)

    def set_departments(self, departments, current=None):
        """Department choices from the company, keeping a legacy value selectable."""
        names = list(departments or [])
        if current and current not in names:
            names.append(current)
        self.department.choices = [(name, name) for name in names]

    def to_payload(self) -> dict:
        """Job fields for job_service.create/update."""
        return {
            'title': self.title.data,
            'department': self.department.data,
            'location': self.location.data,
            'work_policy': self.work_policy.data,
            'employment_type': self.employment_type.data,
            'experience_level': self.experience_level.data,
            'job_type': self.job_type.data,
            'salary_range': self.salary_range.data,
            'description': self.description.data,
            'is_open': bool(self.is_open.data),
        }
