"""Revoked access tokens (written on logout)."""

from datetime import datetime, timezone
from translation_service import db


class RevokedToken(db.Model):
    """A JWT id that must no longer be accepted."""

    __tablename__ = 'revoked_tokens'

    id = db.Column(db.Integer, primary_key=True)
    jti = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    revoked_at = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    @classmethod
    def revoke(cls, jti, user_id, expires_at):
        """Record ``jti`` as revoked. Revoking twice is a no-op."""
        if cls.is_revoked(jti):
            return
        cls.purge_expired()
        db.session.add(cls(jti=jti, user_id=user_id, expires_at=expires_at))
        db.session.commit()

    @classmethod
    def is_revoked(cls, jti):
        return db.session.query(cls.id).filter_by(jti=jti).first() is not None

    @classmethod
    def purge_expired(cls):
        """
        Delete rows for tokens that have expired anyway (not committed).
        Runs on every revoke, which keeps the table small.
        """
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        return cls.query.filter(cls.expires_at < now).delete(synchronize_session=False)

    def __repr__(self):
        return f'<RevokedToken user_id={self.user_id} jti={self.jti}>'
