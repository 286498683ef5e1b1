from sqlalchemy import Column, Integer, String, Text, Boolean, Index, UniqueConstraint, false
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import relationship, deferred
from .base import Base

# Text search configuration shared by the trigger that fills search_vector
# and by the query parser in the module search.
SEARCH_CONFIG = 'english'


class Module(Base):
    __tablename__ = 'modules'

    id = Column(Integer, primary_key=True, autoincrement=True)
    author = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default='')
    latest = Column(String(64), nullable=True)
    featured = Column(Boolean, nullable=False, default=False, server_default=false())

    # Maintained by the modules_search_vector_update trigger. Never loaded:
    # ORM selects skip it and attribute access raises.
    search_vector = deferred(Column(TSVECTOR, nullable=True), raiseload=True)

    releases = relationship(
        "Release",
        back_populates="module",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Release.published.desc()",
    )

    __table_args__ = (
        UniqueConstraint('author', 'name', name='uq_modules_author_name'),
        Index('idx_modules_featured', 'featured'),
        Index('idx_modules_search_vector', 'search_vector', postgresql_using='gin'),
    )

    def __repr__(self) -> str:
        return f"<Module id={self.id} {self.author}/{self.name} latest={self.latest!r}>"
