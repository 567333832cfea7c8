from models import db
from sqlalchemy.orm import relationship

GENDERS = ("male", "female")

class Student(db.Model):
    __tablename__ = "students"

    id = db.Column(db.Integer, primary_key=True)
    classroom_id = db.Column(db.Integer, db.ForeignKey("classrooms.id"), nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    gender = db.Column(db.Enum(*GENDERS, name="student_gender"), nullable=False)
    date_of_birth = db.Column(db.Date, nullable=True)

    classroom = relationship("Classroom", back_populates="students", lazy="raise")
    degree = relationship(
        "Degree",
        secondary="classrooms",
        primaryjoin="Student.classroom_id == Classroom.id",
        secondaryjoin="Classroom.degree_id == Degree.id",
        uselist=False,
        viewonly=True,
        lazy="raise",
    )

    def __repr__(self):
        return f"<Student {self.first_name} {self.last_name} (Classroom ID {self.classroom_id})>"

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "gender": self.gender,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
        }
