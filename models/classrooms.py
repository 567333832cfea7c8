from models import db
from sqlalchemy.orm import relationship

class Classroom(db.Model):
    __tablename__ = "classrooms"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    degree_id = db.Column(db.Integer, db.ForeignKey("degrees.id"), nullable=False, index=True)

    degree = relationship("Degree", back_populates="classrooms", lazy="raise")
    students = relationship("Student", back_populates="classroom", lazy="raise", passive_deletes=True)

    def __repr__(self):
        return f"<Classroom {self.name} (Degree ID {self.degree_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
        }
