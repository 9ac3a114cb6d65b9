"""ContentSection model - one ordered block of a company's careers page."""
import enum
from sqlalchemy import Column, BigInteger, Integer, String, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from careers.database import Base


class SectionType(enum.Enum):
    """Content block kinds; every kind has a renderer."""
    HERO = 'hero'
    TEXT = 'text'
    VIDEO = 'video'
    GALLERY = 'gallery'


SECTION_TYPES = [t.value for t in SectionType]

# Range of the Integer ``order`` column
ORDER_MIN = -2 ** 31
ORDER_MAX = 2 ** 31 - 1


class ContentSection(Base):
    """ContentSection model - owned by exactly one company."""

    __tablename__ = 'content_section'

    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    company_id = Column(String(24), ForeignKey('company.id', ondelete='CASCADE'), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # hero, text, video, gallery
    title = Column(String(300), nullable=False, default='')
    content = Column(Text, nullable=False, default='')
    image_url = Column(String(500))
    video_url = Column(String(500))
    gallery_images = Column(JSON, nullable=False, default=list)
    order = Column(Integer, nullable=False, default=0)
    position = Column(Integer, nullable=False, default=0)  # array index at save time

    # Relationships
    company = relationship('Company', back_populates='content_sections')

    def __repr__(self):
        return f"<ContentSection(company_id={self.company_id}, type='{self.type}', order={self.order})>"

    @property
    def images(self):
        """Gallery images plus the single image, without duplicates."""
        urls = [u for u in (self.gallery_images or []) if u]
        if self.image_url and self.image_url not in urls:
            urls.append(self.image_url)
        return urls

    def to_dict(self):
        return {
            'type': self.type,
            'title': self.title or '',
            'content': self.content or '',
            'image_url': self.image_url or '',
            'video_url': self.video_url or '',
            'gallery_images': list(self.gallery_images or []),
            'order': self.order,
        }
