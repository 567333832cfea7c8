"""
Guarded deletion of degrees, classrooms and students.

Each kind declares how to count its dependents and which delete statements
remove it, leaves first. A delete with dependents is refused unless forced;
a forced delete runs every statement in one transaction.
"""
from collections import namedtuple
from flask import current_app
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from models import db, Degree, Classroom, Student

DeleteOutcome = namedtuple("DeleteOutcome", ["deleted", "reason", "dependents"])


def _classroom_dependents(classroom):
    students = db.session.scalar(
        select(func.count(Student.id)).where(Student.classroom_id == classroom.id)
    )
    return {"students": students}

def _classroom_steps(classroom):
    return [
        delete(Student).where(Student.classroom_id == classroom.id),
        delete(Classroom).where(Classroom.id == classroom.id),
    ]

def _degree_dependents(degree):
    classroom_ids = select(Classroom.id).where(Classroom.degree_id == degree.id)
    classrooms = db.session.scalar(
        select(func.count(Classroom.id)).where(Classroom.degree_id == degree.id)
    )
    students = db.session.scalar(
        select(func.count(Student.id)).where(Student.classroom_id.in_(classroom_ids))
    )
    return {"classrooms": classrooms, "students": students}

def _degree_steps(degree):
    classroom_ids = select(Classroom.id).where(Classroom.degree_id == degree.id)
    return [
        delete(Student).where(Student.classroom_id.in_(classroom_ids)),
        delete(Classroom).where(Classroom.degree_id == degree.id),
        delete(Degree).where(Degree.id == degree.id),
    ]

def _student_steps(student):
    return [delete(Student).where(Student.id == student.id)]


DeletePolicy = namedtuple("DeletePolicy", ["count_dependents", "steps", "blocked_reason"])

DELETE_POLICIES = {
    Student: DeletePolicy(None, _student_steps, None),
    Classroom: DeletePolicy(
        _classroom_dependents,
        _classroom_steps,
        "Cannot delete this classroom because it has some students attached",
    ),
    Degree: DeletePolicy(
        _degree_dependents,
        _degree_steps,
        "Cannot delete this degree because it has some classrooms and students attached",
    ),
}


def _run_step(statement):
    db.session.execute(statement, execution_options={"synchronize_session": False})


class CascadeDeleteManager:
    @staticmethod
    def dependents(entity):
        policy = DELETE_POLICIES[type(entity)]
        if policy.count_dependents is None:
            return {}
        return policy.count_dependents(entity)

    @staticmethod
    def delete(entity, force=False):
        """Delete ``entity`` (and, when forced, everything under it).

        Returns a DeleteOutcome; a refused delete leaves the database untouched.
        Database errors roll the whole cascade back and propagate.
        """
        policy = DELETE_POLICIES[type(entity)]
        counts = CascadeDeleteManager.dependents(entity)

        if any(counts.values()) and not force:
            current_app.logger.warning("Refusing to delete %r: dependents %s", entity, counts)
            return DeleteOutcome(False, policy.blocked_reason, counts)

        label = repr(entity)
        try:
            for statement in policy.steps(entity):
                _run_step(statement)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Cascade delete of %s rolled back", label)
            raise

        if any(counts.values()):
            current_app.logger.info("Deleted %s with dependents %s", label, counts)
        return DeleteOutcome(True, None, counts)
