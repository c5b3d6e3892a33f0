"""Tag model used to group translations (e.g. 'mobile', 'web')."""

from translation_service import db


class Tag(db.Model):
    __tablename__ = 'tags'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)
    updated_at = db.Column(db.DateTime, default=db.func.now(), onupdate=db.func.now(), nullable=False)

    translations = db.relationship(
        'Translation',
        secondary='tag_translation',
        back_populates='tags',
        order_by='Translation.id',
    )

    def to_dict(self, include_translations=False):
        result = {
            'id': self.id,
            'name': self.name,
        }
        if include_translations:
            result['translations'] = [
                t.to_dict(include_tags=False)
                for t in sorted(self.translations, key=lambda t: (t.locale, t.key))
            ]
        return result

    def __repr__(self):
        return f'<Tag {self.name}>'
