"""
附件浏览计数模型
"""
from sqlalchemy import Column, BigInteger, Integer, String, TIMESTAMP, Index, func
from viewcount.db.database import Base


class ViewcountAttachment(Base):
    __tablename__ = "viewcount_attachment"
    __table_args__ = (
        Index('ix_viewcount_attachment_collection', 'institution_id', 'collection_id'),
        Index('ix_viewcount_attachment_item', 'institution_id', 'item_uuid', 'item_version'),
    )
    
    # (机构, 条目UUID, 条目版本, 附件) 唯一确定一个计数单元
    institution_id = Column(BigInteger, primary_key=True, autoincrement=False)
    item_uuid = Column(String(40), primary_key=True)
    item_version = Column(Integer, primary_key=True, autoincrement=False)
    attachment = Column(String(40), primary_key=True)
    collection_id = Column(BigInteger, nullable=False)
    view_count = Column(BigInteger, nullable=False, default=0)
    last_viewed = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f'<ViewcountAttachment {self.institution_id}:{self.item_uuid}/{self.item_version}:{self.attachment}>'
