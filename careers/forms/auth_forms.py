"""
Login and signup forms for the dashboard pages.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, EmailField
from wtforms.validators import DataRequired, Length, Optional, Regexp, EqualTo

EMAIL_REGEX = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class LoginForm(FlaskForm):
    """Dashboard login."""

    email = EmailField(
        'Email',
        validators=[DataRequired(message='Email is required')],
        render_kw={'placeholder': 'you@company.com', 'autocomplete': 'email'}
    )

    password = PasswordField(
        'Password',
        validators=[DataRequired(message='Password is required')],
        render_kw={'autocomplete': 'current-password'}
    )


class SignupForm(FlaskForm):
    """Company registration."""

    name = StringField(
        'Company name',
        validators=[DataRequired(message='Company name is required'), Length(max=200)],
        render_kw={'placeholder': 'Acme Inc.'}
    )

    email = EmailField(
        'Email',
        validators=[
            DataRequired(message='Email is required'),
            Regexp(EMAIL_REGEX, message='Please enter a valid email address')
        ],
        render_kw={'placeholder': 'hr@acme.com', 'autocomplete': 'email'}
    )

    slug = StringField(
        'Page address (optional)',
        validators=[
            Optional(),
            Length(max=50),
            Regexp(r'^[a-zA-Z0-9-]+$', message='Use only letters, numbers and hyphens')
        ],
        render_kw={'placeholder': 'acme'}
    )

    password = PasswordField(
        'Password',
        validators=[
            DataRequired(message='Password is required'),
            Length(min=8, message='Password must be at least 8 characters long')
        ],
        render_kw={'autocomplete': 'new-password'}
    )

    password_confirm = PasswordField(
        'Confirm password',
        validators=[
            DataRequired(message='Please confirm your password'),
            EqualTo('password', message='Passwords do not match')
        ],
        render_kw={'autocomplete': 'new-password'}
    )
