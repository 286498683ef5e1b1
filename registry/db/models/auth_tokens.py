from sqlalchemy import Column, String, Text, Index
from .base import Base


class AuthToken(Base):
    __tablename__ = 'auth_tokens'

    id = Column(String(128), primary_key=True)
    author = Column(String(255), nullable=False)
    # Upstream credential; stored as issued because callers replay it.
    access_token = Column(Text, nullable=False)

    __table_args__ = (
        Index('idx_auth_tokens_author', 'author'),
    )

    def __repr__(self) -> str:
        return f"<AuthToken id={self.id!r} author={self.author!r}>"
