"""Company model - each tenant with its own branded careers page."""
import uuid
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from careers.database import Base


DEFAULT_DEPARTMENTS = ['Engineering', 'Sales', 'Marketing']

DEFAULT_THEME = {
    'primary_color': '#2563eb',
    'background_color': '#ffffff',
    'font': 'Inter',
    'title_color': '#111827',
    'body_color': '#4b5563',
    'button_text_color': '#ffffff',
}


def new_id():
    """24-char hex identifier."""
    return uuid.uuid4().hex[:24]


class Company(Base):
    """Company model - tenant account and public page settings."""

    __tablename__ = 'company'

    id = Column(String(24), primary_key=True, default=new_id)
    slug = Column(String(50), nullable=False, unique=True)  # URL-safe identifier
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True)  # stored lowercase
    password_hash = Column(String(255), nullable=False)
    logo_url = Column(String(500), nullable=False, default='')

    # Theme
    primary_color = Column(String(7), nullable=False, default=DEFAULT_THEME['primary_color'])
    background_color = Column(String(7), nullable=False, default=DEFAULT_THEME['background_color'])
    font = Column(String(100), nullable=False, default=DEFAULT_THEME['font'])
    title_color = Column(String(7), nullable=False, default=DEFAULT_THEME['title_color'])
    body_color = Column(String(7), nullable=False, default=DEFAULT_THEME['body_color'])
    button_text_color = Column(String(7), nullable=False, default=DEFAULT_THEME['button_text_color'])

    departments = Column(JSON, nullable=False, default=lambda: list(DEFAULT_DEPARTMENTS))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    content_sections = relationship(
        'ContentSection',
        back_populates='company',
        cascade='all, delete-orphan',
        order_by='[ContentSection.order, ContentSection.position]',
    )
    jobs = relationship('Job', back_populates='company', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Company(id={self.id}, slug='{self.slug}', name='{self.name}')>"

    @property
    def theme(self):
        """Theme as a plain dict."""
        return {key: getattr(self, key) for key in DEFAULT_THEME}

    def sorted_sections(self):
        """Sections by order, ties kept in saved position."""
        return sorted(self.content_sections, key=lambda s: (s.order, s.position))

    def to_public_dict(self):
        """Public profile; never includes email or password hash."""
        return {
            'id': self.id,
            'slug': self.slug,
            'name': self.name,
            'logo_url': self.logo_url or '',
            'theme': self.theme,
            'departments': list(self.departments or []),
            'content_sections': [s.to_dict() for s in self.sorted_sections()],
        }

    def to_identity_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'slug': self.slug,
        }
