from sqlalchemy import Column, String, Integer
from agriquote.models.base import BaseModel

class Audit(BaseModel):
    __tablename__ = "audits"

    actor_id = Column(String(64), nullable=False, index=True)
    action = Column(String(64), nullable=False)
    resource_id = Column(Integer, nullable=True)
    payload_hash = Column(String(128), nullable=False)
