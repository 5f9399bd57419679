"""
条目浏览计数模型
"""
from sqlalchemy import Column, BigInteger, Integer, String, TIMESTAMP, Index, func
from viewcount.db.database import Base


class ViewcountItem(Base):
    __tablename__ = "viewcount_item"
    __table_args__ = (
        Index('ix_viewcount_item_collection', 'institution_id', 'collection_id'),
    )
    
    institution_id = Column(BigInteger, primary_key=True, autoincrement=False)
    item_uuid = Column(String(40), primary_key=True)
    item_version = Column(Integer, primary_key=True, autoincrement=False)
    collection_id = Column(BigInteger, nullable=False)
    view_count = Column(BigInteger, nullable=False, default=0)
    last_viewed = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f'<ViewcountItem {self.institution_id}:{self.item_uuid}/{self.item_version}>'
