"""
Careers page editor forms: branding, theme and the ordered content sections.

The editor keeps its whole unsaved state in these forms; add/remove/move
actions rebuild the form from ``editor_state`` without touching the database.
"""
from flask_wtf import FlaskForm
from wtforms import Form, StringField, TextAreaField, SelectField, IntegerField, FieldList, FormField
from wtforms.validators import DataRequired, Length, NumberRange, Optional, Regexp

from careers.models import SECTION_TYPES, DEFAULT_THEME, ORDER_MIN, ORDER_MAX

HEX_COLOR = r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$'
HEX_MESSAGE = 'Use a hex colour like #1a2b3c'

FONT_CHOICES = [
    ('Inter', 'Inter'),
    ('Roboto', 'Roboto'),
    ('Open Sans', 'Open Sans'),
    ('Lato', 'Lato'),
    ('Montserrat', 'Montserrat'),
    ('Georgia', 'Georgia'),
]

SECTION_LABELS = {
    'hero': 'Hero',
    'text': 'Text',
    'video': 'Video',
    'gallery': 'Gallery',
}


class SectionForm(Form):
    """One content section (subform, no CSRF of its own)."""

    type = SelectField('Type', choices=[(t, SECTION_LABELS[t]) for t in SECTION_TYPES], default='text')
    title = StringField('Title', validators=[Optional(), Length(max=300)])
    content = TextAreaField('Body', validators=[Optional()])
    image_url = StringField('Image URL', validators=[Optional(), Length(max=500)])
    video_url = StringField('Video URL', validators=[Optional(), Length(max=500)])
    gallery_images = TextAreaField('Gallery image URLs (one per line)', validators=[Optional()])
    order = IntegerField('Order', validators=[Optional(), NumberRange(min=ORDER_MIN, max=ORDER_MAX)], default=0)


class CompanyPageForm(FlaskForm):
    """Branding, theme and sections of a company careers page."""

    name = StringField('Company name', validators=[DataRequired(message='Company name is required'), Length(max=200)])
    logo_url = StringField('Logo URL', validators=[Optional(), Length(max=500)])
    departments = TextAreaField('Departments (one per line)', validators=[Optional()])

    primary_color = StringField('Primary', validators=[Regexp(HEX_COLOR, message=HEX_MESSAGE)],
                                default=DEFAULT_THEME['primary_color'])
    background_color = StringField('Background', validators=[Regexp(HEX_COLOR, message=HEX_MESSAGE)],
                                   default=DEFAULT_THEME['background_color'])
    title_color = StringField('Titles', validators=[Regexp(HEX_COLOR, message=HEX_MESSAGE)],
                              default=DEFAULT_THEME['title_color'])
    body_color = StringField('Body text', validators=[Regexp(HEX_COLOR, message=HEX_MESSAGE)],
                             default=DEFAULT_THEME['body_color'])
    button_text_color = StringField('Button text', validators=[Regexp(HEX_COLOR, message=HEX_MESSAGE)],
                                    default=DEFAULT_THEME['button_text_color'])
    font = SelectField('Font', choices=FONT_CHOICES, default=DEFAULT_THEME['font'], validate_choice=False)

    sections = FieldList(FormField(SectionForm), min_entries=0)


def _lines(text):
    return [line.strip() for line in (text or '').splitlines() if line.strip()]


def editor_state(form: CompanyPageForm) -> dict:
    """Unsaved editor state as a company profile dict."""
    sections = []
    for index, entry in enumerate(form.sections.entries):
        data = entry.form
        order = data.order.data
        sections.append({
            'type': data.type.data,
            'title': data.title.data or '',
            'content': data.content.data or '',
            'image_url': (data.image_url.data or '').strip(),
            'video_url': (data.video_url.data or '').strip(),
            'gallery_images': _lines(data.gallery_images.data),
            'order': index if order is None else order,
        })

    return {
        'name': (form.name.data or '').strip(),
        'logo_url': (form.logo_url.data or '').strip(),
        'departments': _lines(form.departments.data),
        'theme': {key: (getattr(form, key).data or '').strip() for key in DEFAULT_THEME},
        'content_sections': sections,
    }


def form_data_from_state(state: dict) -> dict:
    """Inverse of ``editor_state``: data kwargs for CompanyPageForm."""
    data = {
        'name': state.get('name', ''),
        'logo_url': state.get('logo_url', ''),
        'departments': '\n'.join(state.get('departments') or []),
        'sections': [
            dict(section, gallery_images='\n'.join(section.get('gallery_images') or []))
            for section in state.get('content_sections') or []
        ],
    }
    data.update(state.get('theme') or {})
    return data


def build_page_form(state: dict) -> CompanyPageForm:
    """Editor form pre-filled from a state dict, ignoring the request body."""
    return CompanyPageForm(formdata=None, data=form_data_from_state(state))


def new_section(section_type: str, order: int) -> dict:
    return {
        'type': section_type if section_type in SECTION_TYPES else 'text',
        'title': '',
        'content': '',
        'image_url': '',
        'video_url': '',
        'gallery_images': [],
        'order': order,
    }
