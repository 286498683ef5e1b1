from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base


class Release(Base):
    __tablename__ = 'releases'

    id = Column(Integer, primary_key=True, autoincrement=True)
    module_id = Column(Integer, ForeignKey('modules.id', ondelete='CASCADE'), nullable=False)
    version = Column(String(64), nullable=False)
    downloads = Column(Integer, nullable=False, default=0, server_default='0')
    code = Column(Text, nullable=False)
    published = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    module = relationship("Module", back_populates="releases")

    __table_args__ = (
        UniqueConstraint('module_id', 'version', name='uq_releases_module_version'),
        Index('idx_releases_published', 'published'),
    )

    def __repr__(self) -> str:
        return f"<Release id={self.id} module_id={self.module_id} version={self.version!r}>"
