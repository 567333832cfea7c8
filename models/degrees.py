from models import db
from sqlalchemy.orm import relationship
from sqlalchemy import CheckConstraint

class Degree(db.Model):
    __tablename__ = "degrees"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    max_year = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("max_year > 0", name="check_max_year_positive"),
    )

    # Relations are only ever populated by classes.relations
    classrooms = relationship("Classroom", back_populates="degree", lazy="raise", passive_deletes=True)
    students = relationship(
        "Student",
        secondary="classrooms",
        primaryjoin="Degree.id == Classroom.degree_id",
        secondaryjoin="Classroom.id == Student.classroom_id",
        viewonly=True,
        lazy="raise",
    )

    def __repr__(self):
        return f"<Degree {self.name} ({self.max_year} years)>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "max_year": self.max_year,
        }
