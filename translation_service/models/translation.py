"""Translation model and its association with tags."""

from translation_service import db


# Many-to-many between translations and tags. Rows go away with either parent.
tag_translation = db.Table(
    'tag_translation',
    db.Column('translation_id', db.Integer,
              db.ForeignKey('translations.id', ondelete='CASCADE'), primary_key=True),
    db.Column('tag_id', db.Integer,
              db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    db.Index('ix_tag_translation_tag_id', 'tag_id'),
)


class Translation(db.Model):
    """A single value for a dotted key in one locale."""

    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(255), nullable=False)  # e.g. 'checkout.button.pay'
    locale = db.Column(db.String(10), nullable=False)  # e.g. 'en', 'pt-BR'
    value = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('key', 'locale', name='unique_translation_key_locale'),
        # Export scans walk this index in (locale, key) order
        db.Index('ix_translations_locale_key', 'locale', 'key'),
    )

    tags = db.relationship(
        'Tag',
        secondary=tag_translation,
        back_populates='translations',
        lazy='selectin',
        order_by='Tag.name',
    )

    def to_dict(self, include_tags=True):
        """Convert translation to dictionary."""
        result = {
            'id': self.id,
            'key': self.key,
            'locale': self.locale,
            'value': self.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_tags:
            result['tags'] = [tag.to_dict() for tag in self.tags]
        return result

    def __repr__(self):
        return f'<Translation {self.locale}:{self.key}>'
